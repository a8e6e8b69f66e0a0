'''
fake record generator for chunq fixtures. schemas are plain dicts/lists whose leaves
name faker providers; records come back already split into chunks or pages.
'''

import numpy as np
from faker import Faker
from chunq import StaticSequence, GeneratorSequence, from_pages
from typing import Any, Dict, List, Optional, Tuple


class Generator:
    """schema interpreter."""

    def __init__(self, seed: Optional[int] = None):
        self._fake = Faker()
        self._counters: Dict[int, int] = {}
        if seed is not None:
            self._fake.seed_instance(seed)
            self._rng = np.random.default_rng(seed)
        else:
            self._rng = np.random.default_rng()

    def _resolve_faker_method(self, method_name: str, kwargs: Optional[Dict] = None) -> Any:
        try:
            method = getattr(self._fake, method_name)
        except AttributeError:
            raise ValueError(f"faker has no provider '{method_name}'")
        return method(**(kwargs or {}))

    def _resolve_provider(self, config: Dict, context: Dict) -> Any:
        provider = config["_qen_provider"]
        if provider == "ref":
            key = config["key"]
            if key not in context:
                raise ValueError(f"reference to '{key}' not found in current context.")
            value = context[key]
            if "format" in config:
                return config["format"].format(value)
            return value

        elif provider == "choice":
            # numpy hands back numpy scalars; fixtures want plain python values
            choice_result = self._rng.choice(config["from"])
            return choice_result.item() if hasattr(choice_result, 'item') else choice_result

        elif provider == "sequence":
            # monotonically increasing ints, for pre-sorted merge inputs
            counter = self._counters.get(id(config), config.get("start", 0))
            step = int(self._rng.integers(config.get("min_step", 0), config.get("max_step", 3), endpoint=True))
            self._counters[id(config)] = counter + step
            return counter

        elif provider == "literal":
            if "value" not in config:
                raise ValueError("_qen_provider 'literal' requires a 'value' key.")
            return config["value"]

        raise ValueError(f"unknown _qen_provider: '{provider}'")

    def create(self, schema: Any, context: Optional[Dict] = None) -> Any:
        current_context = context or {}

        if isinstance(schema, dict):
            if "_qen_provider" in schema:
                return self._resolve_provider(schema, current_context)

            # later keys can ref earlier ones
            generated_obj = {}
            for k, v in schema.items():
                merged_context = {**current_context, **generated_obj}
                generated_obj[k] = self.create(v, merged_context)
            return generated_obj

        if isinstance(schema, list):
            if not schema: return []
            item_schema = schema[0]
            count = self._get_count(item_schema)
            actual_item_schema = item_schema.get('_qen_items', item_schema) if isinstance(item_schema, dict) else item_schema
            return [self.create(actual_item_schema, current_context) for _ in range(count)]

        if isinstance(schema, str):
            if hasattr(self._fake, schema):
                return self._resolve_faker_method(schema)
            return schema

        if isinstance(schema, tuple) and len(schema) == 2 and isinstance(schema[1], dict):
            return self._resolve_faker_method(schema[0], schema[1])

        return schema

    def _get_count(self, item_schema: Any) -> int:
        count = 5
        if isinstance(item_schema, dict) and "_qen_count" in item_schema:
            count_config = item_schema["_qen_count"]
            if isinstance(count_config, int):
                count = count_config
            elif isinstance(count_config, (list, tuple)) and len(count_config) == 2:
                low, high = count_config
                count = int(self._rng.integers(low, high, endpoint=True))
        return count

    def chunk_sizes(self, count: int, low: int, high: int) -> List[int]:
        """random chunk sizes in [low, high] that add up to count"""
        sizes = []
        remaining = count
        while remaining > 0:
            size = min(remaining, int(self._rng.integers(low, high, endpoint=True)))
            sizes.append(size)
            remaining -= size
        return sizes


class _SchemaProvider:
    def __init__(self, schema: Any, seed: Optional[int] = None):
        self._schema = schema
        self._generator = Generator(seed)

    def records(self, count: int) -> List[Any]:
        return [self._generator.create(self._schema) for _ in range(count)]

    def take(self, count: int, chunk_size: int = 10, ragged: bool = False) -> StaticSequence:
        """
        generate `count` records split into chunks. with ragged=True chunk sizes vary
        between 1 and chunk_size, like pages from a real api.
        """
        if chunk_size <= 0:
            raise ValueError("chunk size must be positive")
        records = self.records(count)
        if ragged:
            sizes = self._generator.chunk_sizes(count, 1, chunk_size)
        else:
            sizes = [chunk_size] * (count // chunk_size) + ([count % chunk_size] if count % chunk_size else [])
        chunks, offset = [], 0
        for size in sizes:
            chunks.append(records[offset:offset + size])
            offset += size
        return StaticSequence(*chunks)

    def pages(self, count: int, page_size: int = 10) -> Tuple[GeneratorSequence, List[int]]:
        """
        serve `count` records through a page-fetch function. records are generated the
        first time a page asking for them is fetched. returns the sequence and the list
        of page numbers fetched so far.
        """
        records: List[Any] = []
        fetched: List[int] = []

        def fetch_page(page_number: int) -> List[Any]:
            fetched.append(page_number)
            start, stop = page_number * page_size, min((page_number + 1) * page_size, count)
            while len(records) < stop:
                records.append(self._generator.create(self._schema))
            return records[start:stop]

        return from_pages(fetch_page), fetched


def from_schema(schema: Any, seed: Optional[int] = None) -> _SchemaProvider:
    return _SchemaProvider(schema, seed)
