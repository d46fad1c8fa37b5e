"""Integer id allocation for MongoDB collections."""


async def next_id(counters, name: str) -> int:
    """
    Allocate the next integer id for a named sequence.

    Uses a single atomic ``$inc`` upsert on the counters collection, so the
    first call for a sequence returns 1.

    Args:
        counters: MongoDB collection holding ``{"_id": name, "seq": n}`` documents
        name: Sequence name (usually the target collection name)

    Returns:
        Next id in the sequence

    Examples:
        First call for "clients" returns 1, the next returns 2
    """
    doc = await counters.find_one_and_update(
        {"_id": name},
        {"$inc": {"seq": 1}},
        upsert=True,
        return_document=True,
    )
    return int(doc["seq"])
