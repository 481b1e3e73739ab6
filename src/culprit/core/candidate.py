"""Candidate value object."""

from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict


class Candidate(BaseModel):
    """One toggleable unit, identified by an opaque string.

    For WordPress plugins the identifier is the plugin file relative to
    the plugins directory, e.g. ``akismet/akismet.php``. Identity is the
    identifier alone; display names are resolved separately.
    """

    model_config = ConfigDict(frozen=True)

    id: str

    @property
    def slug(self) -> str:
        """Plugin slug as WP-CLI expects it.

        ``akismet/akismet.php`` -> ``akismet``, ``hello.php`` -> ``hello``
        """
        path = PurePosixPath(self.id)
        if len(path.parts) > 1:
            return path.parts[0]
        return path.stem

    @property
    def basename(self) -> str:
        return PurePosixPath(self.id).name

    def __str__(self) -> str:
        return self.id
