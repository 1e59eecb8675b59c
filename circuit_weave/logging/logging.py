import json
import logging
import logging.config
from logging.handlers import RotatingFileHandler
import os
import pathlib
import datetime as dt
import sys
from typing import Any

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

DEFAULT_CONFIG = pathlib.Path(__file__).parent.resolve() / "config.json"


def setup_logging(config_file: str | os.PathLike | None = None) -> None:
    """
    Configures logging
    If user defines 'logging_config.json' in the directory
    where the main file exists than it is loaded as logging
    config, otherwise default circuit_weave logging is used.
    An explicit `config_file` takes precedence over both.
    """
    if config_file is not None:
        config_path = pathlib.Path(config_file)
    else:
        user_config_file = pathlib.Path("logging_config.json")
        config_path = (
            user_config_file if user_config_file.is_file() else DEFAULT_CONFIG
        )
    with open(config_path) as f_in:
        config = json.load(f_in)
    logging.config.dictConfig(config)


class CircuitWeaveJSONFormatter(logging.Formatter):
    """
    Custom Circuit Weave JSON Formatter, one JSON object per record
    Attributes:
        fmt_keys (dict): output keys mapped to LogRecord attributes

    Methods:
        format: Formats the records into a dict
        _prepare_log_dict: Prepares the actual log dict
    """

    def __init__(
        self,
        *,
        fmt_keys: dict[str, str] | None = None,
    ) -> None:
        super().__init__()
        self.fmt_keys = fmt_keys if fmt_keys is not None else {}

    @override
    def format(self, record: logging.LogRecord) -> str:
        message = self._prepare_log_dict(record)
        return json.dumps(message, default=str)

    def _prepare_log_dict(self, record: logging.LogRecord) -> dict:
        always_fields = {
            "message": record.getMessage(),
            "timestamp": dt.datetime.fromtimestamp(
                record.created, tz=dt.timezone.utc
            ).isoformat(),
        }

        if record.exc_info is not None:
            always_fields["exc_info"] = self.formatException(record.exc_info)

        if record.stack_info is not None:
            always_fields["stack_info"] = self.formatStack(record.stack_info)

        message = {
            key: msg_val
            if (msg_val := always_fields.pop(val, None)) is not None
            else getattr(record, val)
            for key, val in self.fmt_keys.items()
        }
        message.update(always_fields)
        # Only extras passed through `extra=` are copied over
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and key not in message:
                message[key] = value
        return message


_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime", "taskName"}


class RotatingFileHandlerWithDir(RotatingFileHandler):
    """
    Custom implementation of RotatingFileHandler, which
    creates log directory and file if it does not exist
    already
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        # Ensure the directory exists
        log_file_path = kwargs.get("filename")
        if log_file_path:
            log_dir = os.path.dirname(log_file_path)
            if log_dir and not os.path.exists(log_dir):
                os.makedirs(log_dir)

        super().__init__(*args, **kwargs)
