"""Tests for name resolution and terminal rendering."""

from culprit.core.candidate import Candidate
from culprit.core.display import ConsoleRenderer, NameResolver
from culprit.core.errors import HostError
from culprit.core.oracle import Answer
from culprit.core.result import Outcome, Status
from culprit.strategy import ScanFrame, SearchStep


class CountingHost:
    def __init__(self, names=None, error=False):
        self.names = names or {}
        self.error = error
        self.lookups = 0

    def display_name(self, candidate):
        self.lookups += 1
        if self.error:
            raise HostError("wp failed")
        return self.names.get(candidate.id)


def test_fallback_names():
    assert NameResolver.fallback(Candidate(id="akismet/akismet.php")) == (
        "akismet/akismet.php"
    )
    assert NameResolver.fallback(Candidate(id="a/b/c.php")) == "b/c.php"
    assert NameResolver.fallback(Candidate(id="hello.php")) == "hello.php"


def test_names_are_resolved_once():
    host = CountingHost({"akismet/akismet.php": "Akismet Anti-spam"})
    names = NameResolver(host)
    candidate = Candidate(id="akismet/akismet.php")

    assert names(candidate) == "Akismet Anti-spam"
    assert names(candidate) == "Akismet Anti-spam"
    assert host.lookups == 1


def test_host_failure_falls_back():
    names = NameResolver(CountingHost(error=True))

    assert names(Candidate(id="hello.php")) == "hello.php"


def test_slug():
    assert Candidate(id="akismet/akismet.php").slug == "akismet"
    assert Candidate(id="hello.php").slug == "hello"


def _renderer(output, names=None):
    console, buffer = output
    renderer = ConsoleRenderer(
        console, NameResolver(CountingHost(names)), clear_screen=False
    )
    return renderer, buffer


def test_scan_frame_marks_current_unit(output):
    renderer, buffer = _renderer(output, {"b.php": "Plugin [B]"})
    pool = [Candidate(id="a.php"), Candidate(id="b.php")]

    renderer.scan_frame(ScanFrame(pool, 1, restored=pool[0]))

    text = buffer.getvalue()
    assert "2. Plugin [B] (currently disabled)" in text
    assert "a.php has been re-enabled" in text
    assert "Disabled unit 2 of 2" in text


def test_search_step_reports_narrowing(output):
    renderer, buffer = _renderer(output)
    step = SearchStep.split([Candidate(id=i) for i in "ABC"], 1)

    renderer.search_step(step)
    step.answer = Answer.NO
    renderer.search_step(step)

    text = buffer.getvalue()
    assert "Step 1" in text
    assert "Disabled 1 units" in text
    assert "Problem is in the active group. Narrowing search." in text


def test_report_identified(output):
    renderer, buffer = _renderer(output, {"c.php": "Culprit"})
    outcome = Outcome(
        strategy="search",
        status=Status.IDENTIFIED,
        culprit=Candidate(id="c.php"),
    )

    renderer.report(outcome)

    assert "Identified problematic unit: Culprit" in buffer.getvalue()


def test_report_aborted_lists_disabled_units(output):
    renderer, buffer = _renderer(output)
    outcome = Outcome(
        strategy="scan",
        status=Status.ABORTED,
        left_disabled=[Candidate(id="x/x.php")],
    )

    renderer.report(outcome)

    text = buffer.getvalue()
    assert "still disabled" in text
    assert "- x/x.php" in text
