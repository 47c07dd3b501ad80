from warden.domain.auth.util.di.provider import ActorRef, AuthProvider

__all__ = ["ActorRef", "AuthProvider"]
