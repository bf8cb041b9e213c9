# ============================================
# tracker/clients/user_client.py
# ============================================
from typing import Dict, Iterable, List, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.cache import cache

from tracker.identity import role_of


class UserDirectoryClient:
    """Resolves user ids to the display fields exposed in API responses"""

    CACHE_PREFIX = 'tracker:user'

    @classmethod
    def _ttl(cls) -> int:
        return getattr(settings, 'TRACKER_USER_CACHE_TTL', 300)

    @classmethod
    def _cache_key(cls, user_id: str) -> str:
        return f"{cls.CACHE_PREFIX}:{user_id}"

    @staticmethod
    def _to_dict(user, with_role: bool) -> Dict:
        data = {
            '_id': str(user.pk),
            'firstName': user.first_name,
            'lastName': user.last_name,
        }
        if with_role:
            data['role'] = {'name': role_of(user)}
        return data

    @staticmethod
    def _valid_pks(user_ids: Iterable[str]) -> List[int]:
        # isdigit alone lets through unicode digits int() refuses
        return [int(uid) for uid in map(str, user_ids) if uid.isascii() and uid.isdigit()]

    @classmethod
    def get_user(cls, user_id: str, with_role: bool = False) -> Optional[Dict]:
        """Get single user by ID"""
        return cls.get_users_by_ids([user_id], with_role=with_role).get(str(user_id))

    @classmethod
    def get_users_by_ids(cls, user_ids: List[str], with_role: bool = False) -> Dict[str, Dict]:
        """
        Batch get users by IDs
        Returns dict: {user_id: user_data}; unknown ids are left out

        Only display names are cached. Roles follow group membership,
        so with_role lookups always read the database.
        """
        if not user_ids:
            return {}

        user_ids = list({str(uid) for uid in user_ids})
        users_dict = {}
        ids_to_fetch = []

        # Check cache first
        for user_id in user_ids:
            cached = None if with_role else cache.get(cls._cache_key(user_id))
            if cached:
                users_dict[user_id] = cached
            else:
                ids_to_fetch.append(user_id)

        pks = cls._valid_pks(ids_to_fetch)
        if pks:
            for user in get_user_model().objects.filter(pk__in=pks):
                user_data = cls._to_dict(user, with_role)
                users_dict[user_data['_id']] = user_data
                if not with_role:
                    cache.set(cls._cache_key(user_data['_id']), user_data, cls._ttl())

        return users_dict

    @classmethod
    def missing_ids(cls, user_ids: List[str]) -> List[str]:
        """Ids that do not resolve to a user, in input order"""
        found = cls.get_users_by_ids(user_ids)
        return [uid for uid in user_ids if str(uid) not in found]

