import json
import logging
import datetime

from sitegrades.config.settings import settings


class StructuredLogger:

    def __init__(self, logger_name='StructuredLogger', level='DEBUG'):
        self.logger = logging.getLogger(logger_name)
        self.logger.setLevel(getattr(logging, str(level).upper(), logging.DEBUG))

        # getLogger returns the same object for a name, only attach one handler
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter('%(message)s')
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
        self.logger.propagate = False


    def _log(self, level, message, **kwargs):
        exc_info = kwargs.pop('exc_info', None)
        log_entry = {
            'timestamp': datetime.datetime.now().isoformat(),
            'level': level.upper(),
            'message': message,
            **kwargs
        }
        json_log = json.dumps(log_entry, default=str)
        getattr(self.logger, level)(json_log, exc_info=exc_info) # Invoke the method corresponding to the level


    def info(self, message, **kwargs):
        self._log('info', message, **kwargs)

    def warning(self, message, **kwargs):
        self._log('warning', message, **kwargs)

    def error(self, message, **kwargs):
        self._log('error', message, **kwargs)

    def debug(self, message, **kwargs):
        self._log('debug', message, **kwargs)

app_logger = StructuredLogger('SiteGradesLogger', settings.LOG_LEVEL)
