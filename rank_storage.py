# rank_storage.py
# Per-user grinding stats (total TGI, current and best world rank).
import json
import logging

from config import DATA_DIR
from engine import default_grinding_stats

log = logging.getLogger(__name__)

FILE = DATA_DIR / "grinding.json"


def _load_all():
    if FILE.exists():
        try:
            return json.loads(FILE.read_text())
        except json.JSONDecodeError:
            aside = FILE.with_name(FILE.name + ".corrupt")
            FILE.replace(aside)
            log.warning("Could not parse %s, moved it to %s and starting empty", FILE, aside)
    return {}


def load(uid: str) -> dict:
    stats = default_grinding_stats()
    stats.update(_load_all().get(uid, {}))
    return stats


def save(uid: str, stats: dict):
    data = _load_all()
    data[uid] = stats
    FILE.parent.mkdir(parents=True, exist_ok=True)
    FILE.write_text(json.dumps(data, indent=2))


def load_everyone() -> dict:
    stats = {}
    for uid, saved in _load_all().items():
        stats[uid] = default_grinding_stats()
        stats[uid].update(saved)
    return stats
