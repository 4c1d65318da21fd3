import json
from typing import Optional


class Payload:
    def __init__(self,
                 alert: str,
                 badge: int = 0,
                 sound: Optional[str] = None,
                 custom: Optional[dict] = None):
        if badge is None:
            badge = 0
        if isinstance(badge, bool) or not isinstance(badge, int) or badge < 0:
            raise ValueError("badge must be a non-negative integer, got {!r}".format(badge))
        self.alert = alert
        self.badge = badge
        self.sound = sound
        self.custom = custom

    def as_dict(self):
        result = dict(aps={})
        aps_dict = result['aps']
        aps_dict['alert'] = self.alert
        aps_dict['badge'] = self.badge
        if self.sound:
            aps_dict['sound'] = self.sound
        if self.custom:
            result['custom'] = dict(self.custom)
        return result

    def encode(self) -> bytes:
        # compact separators, the length limit counts every byte
        return json.dumps(self.as_dict(), separators=(',', ':'),
                          ensure_ascii=False).encode('utf-8')
