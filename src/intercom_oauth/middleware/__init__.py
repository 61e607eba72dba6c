from intercom_oauth.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
