import json

from client.image_collection import ImageCollection
from dal.local_storage_dal import DRAWINGS_KEY, IMAGES_KEY
from models.image_record import SourceKind


async def test_add_assigns_unique_ids_in_append_order(make_draft):
    collection = ImageCollection()
    first = await collection.add(make_draft(SourceKind.UPLOADED))
    second = await collection.add(make_draft(SourceKind.DRAWN))
    third = await collection.add(make_draft(SourceKind.UPLOADED))

    assert [r.id for r in collection] == [first.id, second.id, third.id]
    assert len({first.id, second.id, third.id}) == 3
    assert second.source_kind is SourceKind.DRAWN


async def test_identical_payloads_are_not_deduplicated(make_draft):
    collection = ImageCollection()
    await collection.add(make_draft())
    await collection.add(make_draft())
    assert len(collection) == 2


async def test_remove_unknown_id_is_noop(make_draft):
    collection = ImageCollection()
    await collection.add(make_draft())

    assert await collection.remove("missing") is False
    assert len(collection) == 1


async def test_remove_keeps_relative_order(make_draft):
    collection = ImageCollection()
    records = [await collection.add(make_draft()) for _ in range(4)]

    assert await collection.remove(records[1].id) is True
    assert [r.id for r in collection] == [records[0].id, records[2].id, records[3].id]


async def test_mutations_are_mirrored_and_reload_in_order(storage, make_draft):
    collection = ImageCollection(storage=storage)
    await collection.add(make_draft(payload="QUFB", mime_type="image/png"))
    await collection.add(make_draft(payload="QkJC", mime_type="image/jpeg"))
    await collection.add(make_draft(payload="Q0ND", mime_type="image/webp"))

    stored = json.loads(await storage.get_item(IMAGES_KEY))
    assert stored == [
        "data:image/png;base64,QUFB",
        "data:image/jpeg;base64,QkJC",
        "data:image/webp;base64,Q0ND",
    ]

    reloaded = ImageCollection(storage=storage)
    assert await reloaded.load() == 3
    assert [(r.payload, r.mime_type) for r in reloaded] == [
        ("QUFB", "image/png"),
        ("QkJC", "image/jpeg"),
        ("Q0ND", "image/webp"),
    ]


async def test_images_and_drawings_use_independent_keys(storage, make_draft):
    await ImageCollection(storage=storage).add(make_draft())
    assert await storage.get_item(DRAWINGS_KEY) is None


async def test_malformed_storage_starts_empty(storage):
    await storage.set_item(IMAGES_KEY, "{not json")
    collection = ImageCollection(storage=storage)
    assert await collection.load() == 0
    assert len(collection) == 0


async def test_invalid_entries_are_skipped_on_load(storage):
    await storage.set_item(IMAGES_KEY, json.dumps(["data:image/png;base64,QUFB", "not-a-data-url", 42]))
    collection = ImageCollection(storage=storage)
    assert await collection.load() == 1


async def test_clear_empties_collection_and_storage(storage, make_draft):
    collection = ImageCollection(storage=storage)
    await collection.add(make_draft())
    await collection.clear()

    assert len(collection) == 0
    assert await storage.load_list(IMAGES_KEY) == []
