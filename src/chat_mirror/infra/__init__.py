"""Infrastructure implementations for chat_mirror interfaces."""
