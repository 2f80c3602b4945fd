"""Playback timing: tempo and time signature → measure index.

The clock here only holds state.  Whatever drives playback (a UI timer, a
test) calls :meth:`PlaybackClock.advance` with the elapsed wall-clock time.
"""

import math
from dataclasses import dataclass

DEFAULT_BEATS_PER_MEASURE = 4
DEFAULT_TEMPO = 80
MIN_SPEED = 0.25
MAX_SPEED = 4.0


def parse_beats_per_measure(time: str | None = None) -> int:
    """Return the numerator of a ``N/M`` time signature, or 4 if unusable."""
    if not time:
        return DEFAULT_BEATS_PER_MEASURE
    numerator = time.split("/")[0].strip()
    try:
        beats = int(numerator)
    except ValueError:
        return DEFAULT_BEATS_PER_MEASURE
    return beats if beats > 0 else DEFAULT_BEATS_PER_MEASURE


def seconds_per_measure(tempo: float, beats_per_measure: int) -> float:
    if tempo <= 0:
        return 1
    return (60 / tempo) * beats_per_measure


def current_measure(elapsed: float, seconds_per_measure: float) -> int:
    if seconds_per_measure <= 0:
        return 0
    return math.floor(elapsed / seconds_per_measure)


def current_lyrics_line(measure: int, measure_offset: int, line_count: int) -> int:
    """Index of the lyric line to highlight, or -1.

    Each lyric line of a section occupies one measure starting at
    *measure_offset*; playback past the last line wraps around.
    """
    if line_count == 0:
        return -1
    local = measure - measure_offset
    if local < 0:
        return -1
    return local % line_count


@dataclass
class PlaybackClock:
    """Measure tracking for karaoke-style playback.

    ``play``/``pause``/``stop``/``dispose`` are idempotent.  When the elapsed
    time reaches the end of the song it loops back to zero.
    """

    tempo: float = DEFAULT_TEMPO
    beats_per_measure: int = DEFAULT_BEATS_PER_MEASURE
    total_measures: int = 1
    current_time: float = 0.0
    speed: float = 1.0
    is_playing: bool = False

    @property
    def seconds_per_measure(self) -> float:
        return seconds_per_measure(self.tempo, self.beats_per_measure)

    @property
    def total_duration(self) -> float:
        return self.total_measures * self.seconds_per_measure

    @property
    def current_measure(self) -> int:
        return current_measure(self.current_time, self.seconds_per_measure)

    @property
    def progress(self) -> float:
        if self.total_duration <= 0:
            return 0.0
        return min(self.current_time / self.total_duration, 1.0)

    def play(self) -> None:
        self.is_playing = True

    def pause(self) -> None:
        self.is_playing = False

    def toggle(self) -> None:
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def stop(self) -> None:
        self.pause()
        self.current_time = 0.0

    def dispose(self) -> None:
        self.pause()

    def advance(self, seconds: float) -> int:
        """Move the clock forward by *seconds* of wall time; return the measure."""
        if not self.is_playing:
            return self.current_measure
        new_time = self.current_time + seconds * self.speed
        self.current_time = 0.0 if new_time >= self.total_duration else new_time
        return self.current_measure

    def seek(self, time: float) -> None:
        self.current_time = max(0.0, min(time, self.total_duration))

    def seek_to_measure(self, measure_index: int) -> None:
        index = max(0, min(measure_index, self.total_measures - 1))
        self.current_time = index * self.seconds_per_measure

    def set_speed(self, multiplier: float) -> None:
        self.speed = max(MIN_SPEED, min(multiplier, MAX_SPEED))

    def configure(
        self,
        tempo: float | None = None,
        beats_per_measure: int | None = None,
        total_measures: int | None = None,
    ) -> None:
        """Change timing parameters, rewinding if the song became shorter."""
        if tempo is not None:
            self.tempo = tempo
        if beats_per_measure is not None:
            self.beats_per_measure = beats_per_measure
        if total_measures is not None:
            self.total_measures = total_measures
        if self.current_time > self.total_duration:
            self.current_time = 0.0
