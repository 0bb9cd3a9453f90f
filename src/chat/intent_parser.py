"""
Keyword intent parser for the chat booking assistant.

Maps free text onto one of the `Intent` values and, for booking requests,
resolves the event against the list of events that still have tickets.
"""

import re
from typing import List, Optional, Sequence

from src.chat.schemas import ChatIntent, Intent
from src.events.schemas import Event

USAGE_HINT = 'Try: "show events" or "book 2 tickets for [event name]"'

_GREETING = re.compile(r"^(hi|hello|hey|greetings|good\s+(morning|afternoon|evening))\b")
_SHOW_EVENTS = re.compile(
    r"(show|list|view|display|see|what).*(event|ticket|available)|(event|ticket).*(show|list|view|available)"
)
_BOOK = re.compile(r"\b(book|buy|purchase|reserve)\b")
_COUNT = re.compile(r"\b(\d+|one|two|three|four|five|six|seven|eight|nine|ten)\s+(?:tickets?|seats?|passes?)\b")
_NAME_MARKER = re.compile(r"\b(?:for|to)\s+(?:the\s+)?")

_WORD_NUMBERS = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
}

def parse_ticket_count(text: str) -> int:
    """Number of tickets mentioned in the text, 1 when none is"""
    match = _COUNT.search(text)
    if not match:
        return 1
    raw = match.group(1)
    return int(raw) if raw.isdigit() else _WORD_NUMBERS[raw]

def requested_name(text: str) -> str:
    """Text after the last "for"/"to" that follows the booking verb"""
    booking = _BOOK.search(text)
    tail = text[booking.end():] if booking else text
    markers = list(_NAME_MARKER.finditer(tail))
    if not markers:
        return ""
    return tail[markers[-1].end():].strip(" .!?")

def match_event(text: str, events: Sequence[Event]) -> Optional[Event]:
    """Find the event a request refers to (case-insensitive)"""
    # Full names first, longest first, so "Jazz Night II" wins over "Jazz Night"
    for event in sorted(events, key=lambda e: len(e.name), reverse=True):
        if event.name.lower() in text:
            return event

    # Then a partial name; the shortest candidate is the closest match
    wanted = requested_name(text)
    if not wanted:
        return None
    for event in sorted(events, key=lambda e: len(e.name)):
        if wanted in event.name.lower():
            return event
    return None

def parse_intent(message: str, events: List[Event]) -> ChatIntent:
    """Classify a chat message; booking intents always require confirmation"""
    text = message.lower().strip()

    if _BOOK.search(text):
        tickets = parse_ticket_count(text)
        event = match_event(text, events)
        if event is None:
            return ChatIntent(
                intent=Intent.BOOK_TICKETS,
                tickets=tickets,
                message="I couldn't find that event among those with tickets left. Say \"show events\" to see them.",
            )
        return ChatIntent(
            intent=Intent.BOOK_TICKETS,
            event_name=event.name,
            event_id=event.id,
            tickets=tickets,
            needs_confirmation=True,
            message=(
                f"Book {tickets} ticket(s) for {event.name} on {event.date.isoformat()} "
                f"at ${event.price * tickets}? Please confirm."
            ),
        )

    if _GREETING.search(text):
        return ChatIntent(
            intent=Intent.GREETING,
            message=(
                "Hello! Welcome to TigerTix. I can help you view available events and book tickets. "
                'Try saying "show events" to see what\'s available!'
            ),
        )

    if _SHOW_EVENTS.search(text):
        return ChatIntent(
            intent=Intent.SHOW_EVENTS,
            message="Here are the available events:" if events else "There are no events with tickets left right now.",
            events=list(events),
        )

    return ChatIntent(intent=Intent.OTHER, message=f"Sorry, I didn't understand that. {USAGE_HINT}")
