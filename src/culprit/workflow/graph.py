"""Graph workflow definition."""

from pydantic_graph import Graph

from culprit.core.config import State
from culprit.core.log import logger


def create_workflow():
    """Create the session workflow graph.

    Initialize -> Scan | Search -> Report
    Initialize -> Report (nothing to test, declined, fatal)

    Returns:
        Graph workflow with State as state_type
    """
    logger.debug("Building workflow graph")

    from culprit.workflow.nodes import Initialize, Report, Scan, Search

    return Graph(
        nodes=(
            Initialize,
            Scan,
            Search,
            Report,
        ),
        state_type=State,
    )
