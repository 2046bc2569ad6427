"""Modelos do payload do Alertmanager (entrada) e da mensagem do Google Chat (saída)."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import MalformedPayload


class Alert(BaseModel):
    """Alerta individual dentro de um grupo do Alertmanager."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)
    starts_at: Optional[datetime] = Field(default=None, alias="startsAt")
    ends_at: Optional[datetime] = Field(default=None, alias="endsAt")
    generator_url: str = Field(default="", alias="generatorURL")
    fingerprint: str = ""

    # JSON null vira a forma vazia do campo
    @field_validator("labels", "annotations", mode="before")
    @classmethod
    def null_map(cls, value):
        return {} if value is None else value

    @field_validator("status", "generator_url", "fingerprint", mode="before")
    @classmethod
    def null_string(cls, value):
        return "" if value is None else value


class AlertBatch(BaseModel):
    """Notificação agrupada enviada pelo Alertmanager."""

    model_config = ConfigDict(populate_by_name=True)

    receiver: str = ""
    status: str = ""
    alerts: List[Alert] = Field(default_factory=list)
    group_labels: Dict[str, str] = Field(default_factory=dict, alias="groupLabels")
    common_labels: Dict[str, str] = Field(default_factory=dict, alias="commonLabels")
    common_annotations: Dict[str, str] = Field(default_factory=dict, alias="commonAnnotations")
    external_url: str = Field(default="", alias="externalURL")

    @field_validator("group_labels", "common_labels", "common_annotations", mode="before")
    @classmethod
    def null_map(cls, value):
        return {} if value is None else value

    @field_validator("alerts", mode="before")
    @classmethod
    def null_list(cls, value):
        return [] if value is None else value

    @field_validator("receiver", "status", "external_url", mode="before")
    @classmethod
    def null_string(cls, value):
        return "" if value is None else value


def decode_batch(raw: bytes) -> AlertBatch:
    """Decodifica o corpo JSON recebido em um AlertBatch.

    Levanta MalformedPayload quando o corpo não é JSON válido ou quando algum
    campo tem tipo incompatível (ex.: ``alerts`` que não é lista).
    """
    try:
        return AlertBatch.model_validate_json(raw)
    except ValidationError as exc:
        raise MalformedPayload(str(exc)) from exc


# ---------- Mensagem do Google Chat ----------

class _ChatModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class TextParagraph(_ChatModel):
    text: str


class KeyValue(_ChatModel):
    top_label: Optional[str] = Field(default=None, alias="topLabel")
    content: str
    content_multiline: Optional[bool] = Field(default=None, alias="contentMultiline")
    bottom_label: Optional[str] = Field(default=None, alias="bottomLabel")
    icon: Optional[str] = None


class OpenLink(_ChatModel):
    url: str


class OnClick(_ChatModel):
    open_link: OpenLink = Field(alias="openLink")


class TextButton(_ChatModel):
    text: str
    on_click: OnClick = Field(alias="onClick")


class Button(_ChatModel):
    text_button: TextButton = Field(alias="textButton")

    @classmethod
    def link(cls, text: str, url: str) -> "Button":
        return cls(text_button=TextButton(text=text, on_click=OnClick(open_link=OpenLink(url=url))))


# Cada variante de widget tem um único campo obrigatório: não existe widget
# com duas variantes preenchidas ao mesmo tempo.
class TextParagraphWidget(_ChatModel):
    text_paragraph: TextParagraph = Field(alias="textParagraph")


class KeyValueWidget(_ChatModel):
    key_value: KeyValue = Field(alias="keyValue")


class ButtonsWidget(_ChatModel):
    buttons: List[Button] = Field(min_length=1)


Widget = Union[TextParagraphWidget, KeyValueWidget, ButtonsWidget]


class Section(_ChatModel):
    header: Optional[str] = None
    widgets: List[Widget] = Field(default_factory=list)


class CardHeader(_ChatModel):
    title: str
    subtitle: Optional[str] = None


class Card(_ChatModel):
    header: Optional[CardHeader] = None
    sections: List[Section] = Field(default_factory=list)


class ChatMessage(_ChatModel):
    text: str
    cards: List[Card] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """Forma JSON aceita pelo webhook do Google Chat."""
        return self.model_dump(by_alias=True, exclude_none=True)
