"""Tests for integer id allocation."""
import pytest
from unittest.mock import AsyncMock


@pytest.mark.asyncio
class TestNextId:
    """Tests for next_id."""

    async def test_next_id_increments_counter(self):
        """Test the counter document is incremented atomically."""
        from solowork.utils.sequence import next_id

        mock_counters = AsyncMock()
        mock_counters.find_one_and_update.return_value = {"_id": "clients", "seq": 5}

        result = await next_id(mock_counters, "clients")

        assert result == 5
        mock_counters.find_one_and_update.assert_called_once_with(
            {"_id": "clients"},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=True,
        )
