import logging

audit_logger = logging.getLogger("audit")

def write_log(*, action, resource, status="SUCCESS", ip=None, meta=None):
    level = logging.INFO if status == "SUCCESS" else logging.WARNING
    audit_logger.log(
        level, "%s %s status=%s ip=%s meta=%s",
        action, resource, status, ip or "-", meta or {},
    )
