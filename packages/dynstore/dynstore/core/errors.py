"""dynstore: Error Taxonomy and Logging
-------------------------------------

Exception types, warnings and the shared logger for the dynstore package.

Error Hierarchy
---------------
- DynStoreError: Base exception for all dynstore errors
- DynStoreIOError: File access errors (100-199)
- DynStoreRegistryError: Registration and pattern errors (400-499)
- DynStoreConfigError: Configuration and lookup errors (500-599, 403, 404)
- UnknownStorageError: Unknown storage name in a storage catalog (404)

Constructor failures and errors raised by a default resolver are never
wrapped into this hierarchy; they reach the caller unchanged.

Warning Hierarchy
-----------------
- DynStoreWarning: Base warning for all dynstore warnings

Logging
-------
The shared logger is named "dynstore" and can be configured for console and
file output with optional JSON formatting. Python warnings are captured into
logging with adjustable levels.
"""

import logging
import os

__all__ = [
    "DynStoreError",
    "DynStoreIOError",
    "DynStoreRegistryError",
    "DynStoreConfigError",
    "UnknownStorageError",
    "DynStoreWarning",
    "get_logger",
    "configure_logging",
]


# =============================================================================
# Exception Hierarchy
# =============================================================================


class DynStoreError(Exception):
    """Base exception for all dynstore errors.

    Examples
    --------
    >>> try:
    ...     raise DynStoreConfigError("[500] bad config")
    ... except DynStoreError as e:
    ...     print(e)
    [500] bad config

    """

    pass


class DynStoreIOError(DynStoreError):
    """File access errors (Code 100-199).

    Raised when a configuration file is missing or cannot be read.
    """

    pass


class DynStoreRegistryError(DynStoreError):
    """Registry errors (Code 400-499).

    Raised when registering into a frozen registry, when a lazily registered
    constructor cannot be imported, when a pattern cannot be compiled at
    match time, or when a single-flight constructor re-resolves its own name
    ([420]).
    """

    pass


class DynStoreConfigError(DynStoreError):
    """Configuration errors (Code 500-599).

    Also used for lookup failures ([403] missing dotted attribute, [404]
    unknown storage without a default resolver).
    """

    pass


class UnknownStorageError(DynStoreConfigError, KeyError):
    """No storage is known under the requested name (Code 404)."""

    def __init__(self, name: object) -> None:
        self.name = name
        super().__init__(f"[404] Unknown storage: {name!r}")

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0])


# =============================================================================
# Warning Hierarchy
# =============================================================================


class DynStoreWarning(Warning):
    """Base warning for all dynstore warnings."""

    pass


# =============================================================================
# Logger Configuration
# =============================================================================

_logger: logging.Logger | None = None

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_JSON_FORMAT = (
    '{"time":"%(asctime)s","level":"%(levelname)s",'
    '"logger":"%(name)s","msg":"%(message)s"}'
)


def get_logger() -> logging.Logger:
    """Get the shared dynstore logger instance.

    Returns
    -------
    logging.Logger
        The singleton logger named "dynstore" configured at INFO level by
        default with a console handler. Handlers are created lazily on first use.

    Examples
    --------
    >>> logger = get_logger()
    >>> logger.name
    'dynstore'

    """
    global _logger
    if _logger is None:
        _logger = logging.getLogger("dynstore")
        _logger.setLevel(logging.INFO)
        if not _logger.handlers:
            h = logging.StreamHandler()
            h.setFormatter(logging.Formatter(_TEXT_FORMAT))
            _logger.addHandler(h)
    return _logger


def configure_logging(
    verbose: bool = False,
    log_file: str | None = None,
    as_json: bool = False,
    suppress_warnings: bool = False,
) -> None:
    """Configure the shared logger outputs and warning capture.

    Parameters
    ----------
    verbose : bool, default False
        When True, set logger level to DEBUG; otherwise INFO.
    log_file : str or None, default None
        Optional file path to append logs. Unwritable paths are reported as a
        warning on the console handler and otherwise ignored.
    as_json : bool, default False
        Emit logs in a compact JSON line format when True; otherwise plain text.
    suppress_warnings : bool, default False
        Raise the level of captured Python warnings to ERROR when True;
        otherwise capture warnings at WARNING level.

    Examples
    --------
    >>> configure_logging(verbose=True, as_json=False)  # doctest: +SKIP
    >>> logger = get_logger()
    >>> logger.level in (logging.INFO, logging.DEBUG)
    True

    """
    logger = get_logger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    fmt = logging.Formatter(_JSON_FORMAT if as_json else _TEXT_FORMAT)
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file:
        try:
            fh = logging.FileHandler(os.fspath(log_file), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Cannot open log file {log_file}: {e}")
        else:
            fh.setFormatter(fmt)
            logger.addHandler(fh)

    logging.captureWarnings(True)
    logging.getLogger("py.warnings").setLevel(
        logging.ERROR if suppress_warnings else logging.WARNING
    )
