from dataclasses import dataclass, field

DEFAULT_KEY = "C"
DEFAULT_SECTION = "verse"


@dataclass
class SongMetadata:
    """Declarative song headers (``title``, ``artist``, ``key``)."""

    title: str = ""
    artist: str = ""
    key: str = DEFAULT_KEY
    notes: str = ""

    def to_dict(self) -> dict:
        data = {"title": self.title, "artist": self.artist, "key": self.key}
        if self.notes:
            data["notes"] = self.notes
        return data


@dataclass
class Chord:
    """A chord symbol anchored at a character offset of the plain lyric text.

    ``index`` may equal or exceed the length of the text: the chord then
    sounds at (or after) the last character.
    """

    note: str
    index: int

    def to_dict(self) -> dict:
        return {"note": self.note, "index": self.index}


@dataclass
class LyricLine:
    """One line of lyrics with its chords, kept sorted by ``index``."""

    text: str
    chords: list[Chord] = field(default_factory=list)
    section: str | None = None

    def __post_init__(self):
        # stable: chords sharing an index keep their relative order
        self.chords = sorted(self.chords, key=lambda c: c.index)

    def add_chord(self, chord: Chord) -> None:
        self.chords.append(chord)
        self.chords.sort(key=lambda c: c.index)

    def remove_chord(self, position: int) -> Chord:
        """Remove and return the chord at *position* in :attr:`chords`."""
        return self.chords.pop(position)

    def to_dict(self) -> dict:
        data = {"text": self.text, "chords": [c.to_dict() for c in self.chords]}
        if self.section:
            data["section"] = self.section
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "LyricLine":
        return cls(
            text=data.get("text") or "",
            chords=[
                Chord(note=c["note"], index=int(c["index"]))
                for c in data.get("chords") or []
            ],
            section=data.get("section"),
        )


@dataclass
class Section:
    """A named section of a song (verse, chorus, bridge, etc.)."""

    name: str = DEFAULT_SECTION
    lines: list[LyricLine] = field(default_factory=list)


@dataclass
class ParsedSong:
    """Canonical intermediate representation: metadata plus ordered sections."""

    metadata: SongMetadata = field(default_factory=SongMetadata)
    sections: list[Section] = field(default_factory=list)

    def lyrics_lines(self) -> list[LyricLine]:
        """Flatten the sections into ``lyricsLines``, each tagged with its section."""
        return [
            LyricLine(text=line.text, chords=list(line.chords), section=section.name)
            for section in self.sections
            for line in section.lines
        ]

    @classmethod
    def from_lyrics_lines(
        cls, metadata: SongMetadata, lines: list[LyricLine]
    ) -> "ParsedSong":
        """Group consecutive lines sharing a section name into sections.

        Lines without a section belong to ``verse``.  A section name that
        reappears later starts a new section, as a repeated header would.
        """
        sections: list[Section] = []
        for line in lines:
            name = line.section or DEFAULT_SECTION
            if not sections or sections[-1].name != name:
                sections.append(Section(name=name))
            sections[-1].lines.append(
                LyricLine(text=line.text, chords=list(line.chords))
            )
        return cls(metadata=metadata, sections=sections)

    def to_payload(self) -> dict:
        """Return the JSON body the songs endpoint expects for create/update."""
        payload = self.metadata.to_dict()
        payload["lyricsLines"] = [
            line.to_dict() for line in self.lyrics_lines() if line.text.strip()
        ]
        return payload
