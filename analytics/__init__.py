# careshift_project_root/analytics/__init__.py
# PACKAGE API

"""
Initializes the analytics package: the shift handover digest, chat request
classification, the completion client and chat turn orchestration.
"""

# From shift_digest.py
from .shift_digest import (IncidentSummary, ResidentToWatch, ShiftDigest,
                           ShiftDigestBuilder, ShiftType, build_digest,
                           parse_shift_type)

# From intent.py
from .intent import (ChatIntent, RequestKind, classify_request,
                     current_shift_type, extract_resident_id)

# From completion.py
from .completion import CompletionError, call_completion, safe_call_completion

# From assistant.py
from .assistant import (SYSTEM_PROMPT_BASE, AssistantTurn, ChatAssistant,
                        ChatMessage, WeeklyChart, build_full_system_prompt)

__all__ = [
    # Shift digest
    "IncidentSummary",
    "ResidentToWatch",
    "ShiftDigest",
    "ShiftDigestBuilder",
    "ShiftType",
    "build_digest",
    "parse_shift_type",

    # Request classification
    "ChatIntent",
    "RequestKind",
    "classify_request",
    "current_shift_type",
    "extract_resident_id",

    # Completion service
    "CompletionError",
    "call_completion",
    "safe_call_completion",

    # Chat orchestration
    "SYSTEM_PROMPT_BASE",
    "AssistantTurn",
    "ChatAssistant",
    "ChatMessage",
    "WeeklyChart",
    "build_full_system_prompt",
]
