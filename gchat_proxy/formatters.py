from typing import List

from .constants import (
    ALERTMANAGER_BUTTON_TEXT,
    DEFAULT_STATUS_ICON,
    PROMETHEUS_BUTTON_TEXT,
    STATUS_ICONS,
    UNKNOWN_ALERT_NAME,
)
from .models import (
    Alert,
    AlertBatch,
    Button,
    ButtonsWidget,
    Card,
    CardHeader,
    ChatMessage,
    KeyValue,
    KeyValueWidget,
    Section,
    TextParagraph,
    TextParagraphWidget,
    Widget,
)
from .utils import format_bullets, format_timestamp


def get_alert_name(batch: AlertBatch) -> str:
    if "alertname" in batch.common_labels:
        return batch.common_labels["alertname"]
    if batch.alerts and "alertname" in batch.alerts[0].labels:
        return batch.alerts[0].labels["alertname"]
    return UNKNOWN_ALERT_NAME


def get_status_icon(status: str) -> str:
    return STATUS_ICONS.get(status, DEFAULT_STATUS_ICON)


def _key_value(label, content, multiline=False, icon=None) -> KeyValueWidget:
    return KeyValueWidget(
        key_value=KeyValue(
            top_label=label,
            content=content,
            content_multiline=True if multiline else None,
            icon=icon,
        )
    )


def _link_button(text: str, url: str) -> ButtonsWidget:
    return ButtonsWidget(buttons=[Button.link(text, url)])


def build_summary_section(batch: AlertBatch) -> Section:
    widgets: List[Widget] = [
        _key_value("Status", batch.status, icon=get_status_icon(batch.status)),
    ]
    if batch.common_labels:
        widgets.append(_key_value("Common Labels", format_bullets(batch.common_labels), multiline=True))
    if batch.common_annotations:
        widgets.append(_key_value("Common Annotations", format_bullets(batch.common_annotations), multiline=True))
    return Section(header="Summary", widgets=widgets)


def build_alert_section(position: int, alert: Alert) -> Section:
    """Seção de um alerta individual (``position`` começa em 1)."""
    widgets: List[Widget] = []

    # description tem prioridade sobre summary
    text = alert.annotations.get("description")
    if text is None:
        text = alert.annotations.get("summary")
    if text is not None:
        widgets.append(TextParagraphWidget(text_paragraph=TextParagraph(text=text)))

    if alert.labels:
        widgets.append(_key_value("Labels", format_bullets(alert.labels), multiline=True))

    widgets.append(_key_value("Started", format_timestamp(alert.starts_at)))

    if alert.generator_url:
        widgets.append(_link_button(PROMETHEUS_BUTTON_TEXT, alert.generator_url))

    return Section(header=f"Alert #{position}", widgets=widgets)


def build_chat_message(batch: AlertBatch) -> ChatMessage:
    """Converte um grupo do Alertmanager em uma mensagem de card do Google Chat.

    Função pura: sem rede nem disco. Sempre gera exatamente um card com a
    seção "Summary", uma seção por alerta (na ordem recebida) e, se houver
    ``externalURL``, uma seção final com o link para o Alertmanager.
    """
    status_text = batch.status.upper()
    alert_name = get_alert_name(batch)
    count = len(batch.alerts)

    sections = [build_summary_section(batch)]
    sections.extend(build_alert_section(i, alert) for i, alert in enumerate(batch.alerts, start=1))

    if batch.external_url:
        sections.append(Section(widgets=[_link_button(ALERTMANAGER_BUTTON_TEXT, batch.external_url)]))

    card = Card(
        header=CardHeader(
            title=f"{status_text} Alert: {alert_name}",
            subtitle=f"{count} alert(s)",
        ),
        sections=sections,
    )
    return ChatMessage(text=f"{status_text} Alert: {alert_name} ({count} alerts)", cards=[card])
