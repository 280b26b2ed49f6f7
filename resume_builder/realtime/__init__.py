from resume_builder.realtime.server import notify_resume_update, sio

__all__ = ["notify_resume_update", "sio"]
