"""Centralized user-facing text for the entrytitles CLI."""

from __future__ import annotations

class Styles:
    WARNING = "yellow"
    SUCCESS = "green"
    INFO = "dim"
    TABLE_HEADER = "bold magenta"


class Messages:
    APP_HELP = "entrytitles – cache the display titles of blog entry files."
    HELP_VERSION = "Show version and exit."
    HELP_VERBOSE = "Increase diagnostic output (-v for cache state, -vv for per-file titles)."
    HELP_INDEX_PATH = "Data directory holding the entry files."
    HELP_INDEX_INCLUDE = "Include hidden files and directories when scanning entries."
    HELP_RESPECT_GITIGNORE = "Skip files ignored by .gitignore (use --no-respect-gitignore to include them)."
    HELP_REINDEX_ALL = "Re-extract every title, discarding the existing cache."
    HELP_REINDEX = "Add titles for new entries only (the default behaviour)."
    HELP_REINDEX_CAT = "Re-extract titles for entries under the given category (additive)."
    HELP_DELINDEX = "Drop cached titles of entries that no longer exist."
    HELP_NO_CACHE = "Do not read or write the title cache for this run."
    HELP_SHOW_PORCELAIN = "Print tab-separated `file_id<TAB>title` lines."
    HELP_SHOW_CONFIG = "Show current configuration."
    HELP_SET_USE_CACHING = "Enable or disable the persistent title cache (true/false)."
    HELP_SET_STATE_DIR = "Set the state directory holding the default cache file."
    HELP_SET_CACHEFILE = "Set an explicit path for the title cache file."
    HELP_CLEAR_CACHEFILE = "Reset the title cache file to the default location."

    ERROR_CONFIG_JSON_INVALID = "Config payload must be a JSON object."
    ERROR_CONFIG_VALUE_INVALID = "Invalid value for config field `{field}`."
    ERROR_BOOLEAN_INVALID = "Expected a boolean value (true/false), got `{value}`."
    ERROR_REINDEX_CAT_MISSING = "Category `{category}` does not exist; running an incremental update instead."

    INFO_NO_FILES = "No entry files found in the selected directory."
    INFO_INDEX_RUNNING = "Indexing entry titles under {path}..."
    INFO_INDEX_SUMMARY = "{mode} reindex: {entries} titles cached, {changed} changed."
    INFO_INDEX_SAVED = "Title cache saved to {path}."
    INFO_INDEX_UNCHANGED = "Title cache already up to date; nothing written."
    INFO_CACHING_DISABLED = "Caching disabled; titles were extracted in memory only."
    WARNING_INDEX_NOT_SAVED = "Title cache could not be saved ({reason}); titles kept in memory only."
    INFO_CACHE_EMPTY = "No cached titles found at {path}."
    INFO_CACHE_CLEARED = "Removed {count} cached title{plural} from {path}."
    INFO_CACHE_CLEAR_NONE = "No title cache found at {path}."
    INFO_USE_CACHING_SET = "Caching set to {value}."
    INFO_STATE_DIR_SET = "State directory set to {value}."
    INFO_CACHEFILE_SET = "Title cache file set to {value}."
    INFO_CACHEFILE_CLEARED = "Title cache file reset to the default location."
    INFO_CONFIG_SUMMARY = (
        "Caching: {caching}\n"
        "State directory: {state_dir}\n"
        "Title cache file: {cachefile}\n"
        "File extensions: {extensions}"
    )

    TABLE_TITLE = "Cached entry titles"
    TABLE_HEADER_FILE_ID = "Entry"
    TABLE_HEADER_TITLE = "Title"
