"""pi-mention: trigger-character mention detection for editable text surfaces."""

# Text surfaces
from pi.mention.accessor import TextAccessor, TextInput, word_before_caret
from pi.mention.buffer import TextBuffer

# Candidates and filtering
from pi.mention.candidates import CandidateIndex, get_field, normalize_candidates

# Components
from pi.mention.components import MentionInput, MentionList, MentionListTheme, PlainTheme

# Configuration
from pi.mention.config import MentionConfig, config_from_dict

# Controller
from pi.mention.controller import MentionController

# Keyboard events
from pi.mention.keys import KeyCode, KeyEvent, key_event_from_terminal, resolve_char

# Platform
from pi.mention.platform import PlatformKind, detect_platform

# List presenter contract
from pi.mention.presenter import ListOptions, ListPresenter, PositionHint, PositionType
from pi.mention.search import filter_candidates

# Session state machine
from pi.mention.session import (
    CLOSED,
    Closed,
    Keystroke,
    ListView,
    Open,
    SessionState,
    Suspended,
    Transition,
    transition,
)

__all__ = [
    # Text surfaces
    "TextAccessor",
    "TextBuffer",
    "TextInput",
    "word_before_caret",
    # Candidates
    "CandidateIndex",
    "filter_candidates",
    "get_field",
    "normalize_candidates",
    # Components
    "MentionInput",
    "MentionList",
    "MentionListTheme",
    "PlainTheme",
    # Configuration
    "MentionConfig",
    "config_from_dict",
    # Controller
    "MentionController",
    # Keys
    "KeyCode",
    "KeyEvent",
    "key_event_from_terminal",
    "resolve_char",
    # Platform
    "PlatformKind",
    "detect_platform",
    # Presenter
    "ListOptions",
    "ListPresenter",
    "PositionHint",
    "PositionType",
    # Session
    "CLOSED",
    "Closed",
    "Keystroke",
    "ListView",
    "Open",
    "SessionState",
    "Suspended",
    "Transition",
    "transition",
]
