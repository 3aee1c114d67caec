from .models import PartyInfo, PersonName, Role, User

__all__ = ["PartyInfo", "PersonName", "Role", "User"]
