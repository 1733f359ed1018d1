from infra.session.client import SessionServiceClient, UpstreamError

__all__ = ["SessionServiceClient", "UpstreamError"]
