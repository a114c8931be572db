import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from am_executor.logsink import LOGGER_NAME  # noqa: E402


def python_command(code):
    """(comando, args) que executa um trecho Python num processo filho."""
    return sys.executable, ['-c', code]


def reset_logging():
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def sample_payload():
    # Formato real de um webhook do Alertmanager (version 4)
    return {
        "version": "4",
        "groupKey": "{}:{alertname=\"DiskFull\"}",
        "truncatedAlerts": 0,
        "receiver": "team-x",
        "status": "firing",
        "externalURL": "http://alertmanager:9093",
        "groupLabels": {"alertname": "DiskFull"},
        "commonLabels": {"alertname": "DiskFull", "severity": "critical"},
        "commonAnnotations": {"summary": "disk almost full"},
        "alerts": [
            {
                "status": "firing",
                "labels": {"alertname": "DiskFull", "severity": "critical", "instance": "10.0.0.1:9100"},
                "annotations": {"summary": "disk almost full", "description": "usage=97%"},
                "startsAt": "2023-11-14T22:13:20Z",
                "endsAt": "0001-01-01T00:00:00Z",
                "generatorURL": "http://prometheus:9090/graph?g0.expr=disk",
                "fingerprint": "c2a5d5c1d9f3b6a1",
            },
            {
                "status": "resolved",
                "labels": {"alertname": "DiskFull", "severity": "critical", "instance": "10.0.0.2:9100"},
                "annotations": {},
                "startsAt": "2023-11-14T22:00:00.123456789+01:00",
                "endsAt": "2023-11-14T22:10:00Z",
                "generatorURL": "",
            },
        ],
    }
