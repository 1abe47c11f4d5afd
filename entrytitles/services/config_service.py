"""Logic helpers for the `entrytitles config` command."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import (
    Config,
    load_config,
    set_state_dir,
    set_titles_cachefile,
    set_use_caching,
)


@dataclass(slots=True)
class ConfigUpdateResult:
    use_caching_set: bool = False
    state_dir_set: bool = False
    titles_cachefile_set: bool = False
    titles_cachefile_cleared: bool = False

    @property
    def changed(self) -> bool:
        return any(
            (
                self.use_caching_set,
                self.state_dir_set,
                self.titles_cachefile_set,
                self.titles_cachefile_cleared,
            )
        )


def apply_config_updates(
    *,
    use_caching: bool | None = None,
    state_dir: str | None = None,
    titles_cachefile: str | None = None,
    clear_titles_cachefile: bool = False,
) -> ConfigUpdateResult:
    """Apply config mutations and report which fields were updated."""

    result = ConfigUpdateResult()
    if use_caching is not None:
        set_use_caching(use_caching)
        result.use_caching_set = True
    if state_dir is not None:
        set_state_dir(state_dir)
        result.state_dir_set = True
    if titles_cachefile is not None:
        set_titles_cachefile(titles_cachefile)
        result.titles_cachefile_set = True
    if clear_titles_cachefile:
        set_titles_cachefile(None)
        result.titles_cachefile_cleared = True
    return result


def get_config_snapshot() -> Config:
    """Return the current configuration dataclass."""

    return load_config()
