from skillshare.services.users.directory import UserDirectory, OAuthLinkConflict

__all__ = ["UserDirectory", "OAuthLinkConflict"]
