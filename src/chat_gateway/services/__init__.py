from .relay import ChatRelay, StreamSession, UpstreamStream, chat_relay, format_record

__all__ = ["ChatRelay", "StreamSession", "UpstreamStream", "chat_relay", "format_record"]
