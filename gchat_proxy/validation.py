from .errors import AlertMissingLabels, AlertMissingStatus, EmptyAlerts, MissingStatus
from .models import AlertBatch


def validate_batch(batch: AlertBatch) -> None:
    """Valida a estrutura mínima do grupo; a primeira regra violada vence."""
    if not batch.status:
        raise MissingStatus()

    if not batch.alerts:
        raise EmptyAlerts()

    for index, alert in enumerate(batch.alerts):
        if not alert.status:
            raise AlertMissingStatus(index)
        if not alert.labels:
            raise AlertMissingLabels(index)
