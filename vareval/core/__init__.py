#!/usr/bin/env python

from vareval.core.exceptions import VarEvalError, SampleSetError
from vareval.core.logger_setup import set_log_level, get_logger, capture_logs
