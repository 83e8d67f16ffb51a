# careshift_project_root/analytics/assistant.py
# CHAT TURN ORCHESTRATION

import json
import logging
import uuid
from typing import Any, Callable, Dict, List, Literal, Optional, Sequence

import pandas as pd
from pydantic import BaseModel, Field

from config import settings
from data_processing.aggregation import WeekBucket, weekly_series_for_subject
from data_processing.helpers import to_facility_timestamp
from data_processing.loaders import FacilityData
from .completion import ChatMessages, call_completion, safe_call_completion
from .intent import ChatIntent, RequestKind, classify_request, current_shift_type
from .shift_digest import ShiftDigest, build_digest

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_BASE = f"""You are {settings.ASSISTANT_NAME}, a specialized AI assistant for nurses in a senior living facility. Maintain a positive, professional, and pleasant tone.
Your primary goal is to provide clear and concise information based on the provided data context and conversation history.

You have access to information about residents, staff, rooms, incidents (like falls), medications, shifts, and activities.
Key resident fields: id, name, dob, roomNumber, conditions, allergies, fallRisk, notes.
Key incident fields: id, residentId, type, timestamp, location, description, witnessedBy.
Key activity fields: id, residentId, type, timestamp, staffId, outcome.

Keep your answers brief and to the point. Avoid unnecessary elaboration.

**IMPORTANT:** If the user asks for a graph/chart/weekly summary and the following messages provide aggregated weekly data, acknowledge that the graph is being displayed visually in the app. Then, provide a brief textual summary based *only* on the aggregated weekly data provided in the prompt. Do not mention your inability to graph directly in this case. Focus on summarizing the trends shown in the data (e.g., 'Okay, I'm showing the graph now. We see one fall occurred in the week of Apr 21-27.')."""


def build_full_system_prompt(raw_db: Dict[str, Any]) -> str:
    """Base prompt plus the whole facility dataset, used for open questions."""
    return f"{SYSTEM_PROMPT_BASE}\n\nHere is the current facility data:\n```json\n{json.dumps(raw_db, indent=2, default=str)}\n```"


class ChatMessage(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    text: str
    sender: Literal["user", "assistant"]


class WeeklyChart(BaseModel):
    resident_id: str
    title: str
    data_type_label: str
    buckets: List[WeekBucket]


class AssistantTurn(BaseModel):
    """Everything one chat turn produced; the caller decides what to keep."""
    user_message: ChatMessage
    reply: Optional[ChatMessage] = None
    intent: ChatIntent
    chart: Optional[WeeklyChart] = None
    digest: Optional[ShiftDigest] = None
    error: Optional[str] = None


def _digest_context(digest: ShiftDigest) -> str:
    return (
        "Okay, generating the shift summary. Key points:\n"
        f"- Previous Handover: {'Provided' if digest.previous_shift_notes else 'None'}\n"
        f"- Recent Incidents: {len(digest.recent_incidents)}\n"
        f"- Residents to Watch: {len(digest.residents_to_watch)}"
    )


def _chart_context(chart: WeeklyChart) -> str:
    series = json.dumps([bucket.model_dump(mode='json') for bucket in chart.buckets])
    return (
        f"Okay, displaying a graph of {chart.data_type_label} for {chart.resident_id}. "
        f"Here is the weekly summary data:\n{series}"
    )


class ChatAssistant:
    """
    Runs one chat turn: classify the message, run at most one of the digest
    or weekly-series queries, build the completion prompt, call the service.
    Holds no conversation state of its own.
    """
    def __init__(
        self,
        data: FacilityData,
        completion_fn: Callable[..., str] = call_completion
    ):
        self.data = data
        self.completion_fn = completion_fn
        self._full_system_prompt = build_full_system_prompt(data.raw)

    def _weekly_chart(self, intent: ChatIntent, now: pd.Timestamp) -> WeeklyChart:
        lookback_days = settings.ANALYTICS.chart_lookback_days
        buckets = weekly_series_for_subject(
            self.data.events, intent.resident_id, intent.metric.event_type, lookback_days, now=now
        )
        return WeeklyChart(
            resident_id=intent.resident_id,
            title=f"{intent.metric.title} - Last {lookback_days} Days ({intent.resident_id})",
            data_type_label=intent.metric.data_type_label,
            buckets=buckets,
        )

    def _build_messages(
        self,
        history: Sequence[ChatMessage],
        user_message: ChatMessage,
        chart: Optional[WeeklyChart],
        digest: Optional[ShiftDigest]
    ) -> ChatMessages:
        if chart is not None or digest is not None:
            context = _chart_context(chart) if chart is not None else _digest_context(digest)
            return [
                {"role": "system", "content": SYSTEM_PROMPT_BASE},
                {"role": "user", "content": user_message.text},
                {"role": "assistant", "content": context},
            ]
        return [{"role": "system", "content": self._full_system_prompt}] + [
            {"role": msg.sender, "content": msg.text} for msg in [*history, user_message]
        ]

    def respond(self, history: Sequence[ChatMessage], user_text: str, now: Any = None) -> AssistantTurn:
        """
        Produces the turn for `user_text`. `history` is read, never modified;
        a failed completion yields an error reply instead of raising.
        """
        text = (user_text or "").strip()
        if not text:
            raise ValueError("user_text must not be empty")

        reference = to_facility_timestamp(now if now is not None else pd.Timestamp.now(tz='UTC'))
        user_message = ChatMessage(text=text, sender="user")
        intent = classify_request(text, self.data.residents)

        chart: Optional[WeeklyChart] = None
        digest: Optional[ShiftDigest] = None
        if intent.kind is RequestKind.SHIFT_SUMMARY:
            digest = build_digest(
                self.data, current_shift_type(reference), reference, settings.ANALYTICS.digest_lookback_hours
            )
        elif intent.kind is RequestKind.WEEKLY_CHART:
            chart = self._weekly_chart(intent, reference)

        messages = self._build_messages(history, user_message, chart, digest)
        logger.info(f"Sending {len(messages)} message(s) for a '{intent.kind.value}' turn.")

        reply_text, error = safe_call_completion(messages, completion_fn=self.completion_fn)
        if error is not None:
            logger.error(f"Completion failed for '{intent.kind.value}' turn: {error}")
            return AssistantTurn(
                user_message=user_message,
                reply=ChatMessage(text=f"Error: {error}", sender="assistant"),
                intent=intent, chart=chart, digest=digest, error=error,
            )

        return AssistantTurn(
            user_message=user_message,
            reply=ChatMessage(text=reply_text.strip(), sender="assistant"),
            intent=intent, chart=chart, digest=digest,
        )
