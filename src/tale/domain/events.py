from dataclasses import dataclass


@dataclass
class TimeAdvanced:
    seconds: int
    time_after: int


@dataclass
class HourChanged:
    hours_crossed: int
    hour_after: int


@dataclass
class WaitInterrupted:
    minutes_waited: int
    minutes_requested: int
    source: str


@dataclass
class SceneAdvanced:
    pages_run: int
    remaining: int


@dataclass
class GameSaved:
    slot: str
    time: int


@dataclass
class GameLoaded:
    slot: str
    time: int
