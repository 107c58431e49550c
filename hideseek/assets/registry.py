from __future__ import annotations

import csv
import os
import re
from dataclasses import dataclass
from pathlib import Path


def _norm_key(s: str) -> str:
    return re.sub(r"\s+", " ", s).strip().casefold()


@dataclass(frozen=True, slots=True)
class StationGraph:
    """Undirected station map.

    Adjacency lists are derived from the edge set, so every hop can be travelled
    both ways. Neighbour order follows the order edges were declared in.
    """

    stations: tuple[str, ...]
    start_station: str
    adjacency: dict[str, tuple[str, ...]]

    @staticmethod
    def from_edges(*, stations: list[str], start_station: str, edges: list[tuple[str, str]]) -> "StationGraph":
        key_to_station: dict[str, str] = {}
        for s in stations:
            key = _norm_key(s)
            if key in key_to_station:
                raise AssetLoadError(f"Duplicate station: {s}")
            key_to_station[key] = s

        def canonical(name: str) -> str:
            station = key_to_station.get(_norm_key(name))
            if station is None:
                raise AssetLoadError(f"Unknown station: {name}")
            return station

        start = canonical(start_station)

        build: dict[str, list[str]] = {s: [] for s in stations}
        for a, b in edges:
            ca, cb = canonical(a), canonical(b)
            if ca == cb:
                raise AssetLoadError(f"Station cannot connect to itself: {ca}")
            if cb not in build[ca]:
                build[ca].append(cb)
            if ca not in build[cb]:
                build[cb].append(ca)

        return StationGraph(
            stations=tuple(stations),
            start_station=start,
            adjacency={k: tuple(v) for k, v in build.items()},
        )

    def neighbors(self, station: str | None) -> tuple[str, ...]:
        if station is None:
            return ()
        return self.adjacency.get(station, ())

    def is_adjacent(self, origin: str | None, destination: str) -> bool:
        return destination in self.neighbors(origin)


@dataclass(frozen=True, slots=True)
class GameAssets:
    roster: tuple[str, ...]
    graph: StationGraph
    challenge_pool: tuple[str, ...]

    @property
    def start_station(self) -> str:
        return self.graph.start_station


class AssetLoadError(RuntimeError):
    pass


def _read_csv_rows(path: Path) -> list[list[str]]:
    try:
        with path.open(encoding="utf-8-sig", newline="") as f:
            rows = [[c.strip() for c in row] for row in csv.reader(f)]
    except FileNotFoundError as e:
        raise AssetLoadError(f"Asset file not found: {path}") from e

    return [row for row in rows if any(cell.strip() for cell in row)]


def _rows_with_header(path: Path, header: list[str]) -> list[list[str]]:
    rows = _read_csv_rows(path)
    if not rows:
        raise AssetLoadError(f"Empty CSV: {path}")

    got = [c.casefold() for c in rows[0]]
    if got[: len(header)] != header:
        raise AssetLoadError(f"Unexpected header in {path}: {rows[0]}")
    return [row for row in rows[1:] if len(row) >= len(header) and all(row[: len(header)])]


def load_roster_csv(path: Path) -> tuple[str, ...]:
    names = [row[0] for row in _rows_with_header(path, ["name"])]
    if not names:
        raise AssetLoadError(f"No players in {path}")
    if len(set(names)) != len(names):
        raise AssetLoadError(f"Duplicate player names in {path}")
    return tuple(names)


def load_station_graph(*, stations_path: Path, edges_path: Path) -> StationGraph:
    station_rows = _rows_with_header(stations_path, ["name", "start"])
    stations = [row[0] for row in station_rows]
    starts = [row[0] for row in station_rows if row[1].strip().lower() in {"1", "true", "yes"}]
    if len(starts) != 1:
        raise AssetLoadError(f"Exactly one start station required in {stations_path} (got {len(starts)})")

    edges = [(row[0], row[1]) for row in _rows_with_header(edges_path, ["from", "to"])]
    return StationGraph.from_edges(stations=stations, start_station=starts[0], edges=edges)


def load_challenge_pool_csv(path: Path) -> tuple[str, ...]:
    prompts = [row[0] for row in _rows_with_header(path, ["challenge"])]
    if not prompts:
        raise AssetLoadError(f"Empty challenge pool: {path}")
    return tuple(prompts)


def default_game_assets() -> GameAssets:
    """The Hong Kong board the game ships with; used when asset CSVs are missing."""

    stations = [
        "Central",
        "Admiralty",
        "Tsim Sha Tsui",
        "Mong Kok",
        "Prince Edward",
        "Sham Shui Po",
        "Wan Chai",
        "Star Ferry",
    ]
    edges = [
        ("Central", "Admiralty"),
        ("Central", "Star Ferry"),
        ("Admiralty", "Wan Chai"),
        ("Wan Chai", "Tsim Sha Tsui"),
        ("Tsim Sha Tsui", "Mong Kok"),
        ("Mong Kok", "Prince Edward"),
        ("Prince Edward", "Sham Shui Po"),
    ]
    return GameAssets(
        roster=("Alice", "Bob", "Charlie", "David", "Eve", "Frank"),
        graph=StationGraph.from_edges(stations=stations, start_station="Central", edges=edges),
        challenge_pool=(
            "Sing a Cantonese nursery rhyme",
            "Spell 'Hong Kong' backwards",
            "Do 10 jumping jacks in public",
            "Say a station fact out loud",
            "Translate 'Hello' into Cantonese",
            "Name 3 MTR stations in 10 seconds",
        ),
    )


def load_game_assets(*, assets_dir: Path) -> GameAssets:
    # Missing files fall back to the built-in board.
    # Set HIDESEEK_STRICT_ASSETS=1 to fail instead.
    strict = os.getenv("HIDESEEK_STRICT_ASSETS", "").strip().lower() in {"1", "true", "yes"}

    try:
        graph = load_station_graph(
            stations_path=assets_dir / "stations.csv",
            edges_path=assets_dir / "edges.csv",
        )
        return GameAssets(
            roster=load_roster_csv(assets_dir / "players.csv"),
            graph=graph,
            challenge_pool=load_challenge_pool_csv(assets_dir / "challenges.csv"),
        )
    except AssetLoadError:
        if strict:
            raise
        return default_game_assets()
