from hallway.config import get_settings
from hallway.services import editor
from hallway.services.publish import publish_hallway
from hallway.services.storage import FileStorage

SAMPLE_SURNAMES = [
    ["Korhonen", "Virtanen"],
    ["Mäkinen"],
    ["Nieminen", "Mäkelä"],
    ["Hämäläinen"],
    ["Laine", ""],
    ["Heikkinen"],
]


def sample_hallway(serial: str = "DEMO001"):
    hallway = editor.new_hallway(
        "landscape",
        name="Rappu A",
        building="Esimerkkikatu 1",
        serial=serial,
        news_enabled=True,
        news_rss_url="https://yle.fi/rss/uutiset/paauutiset",
        news_limit=6,
    )
    surnames = iter(SAMPLE_SURNAMES)
    for level in (1, 2, 3):
        hallway = editor.add_floor(hallway, level=level)
        floor_id = hallway.floors[-1].id
        for _ in range(2):
            hallway = editor.add_apartment(hallway, floor_id)
            apartment = hallway.floors[-1].apartments[-1]
            names = next(surnames)
            hallway = editor.set_tenant_surname(hallway, floor_id, apartment.id, apartment.tenants[0].id, names[0])
            for extra in names[1:]:
                hallway = editor.add_tenant(hallway, floor_id, apartment.id, extra)
    return hallway


def seed() -> None:
    settings = get_settings()
    storage = FileStorage(settings)
    storage.ensure_storage()
    result = publish_hallway(storage, sample_hallway(), settings.document_dir)
    print(f"{result.key}: {'saved' if result.saved else result.error}")


if __name__ == "__main__":
    seed()
