"""Chat booking assistant: keyword intent parsing and chat-confirmed bookings."""
