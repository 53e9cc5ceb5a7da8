"""Page widgets the explorer writes into.

Each slot of `Widgets` stands for one element of the page and may be None
when the page doesn't have it; writers check for presence and skip.
"""

from dataclasses import dataclass, field


@dataclass
class TextWidget:
    text: str = ""


@dataclass
class DefinitionListWidget:
    """A <dl>: ordered (term, description) pairs."""
    items: list[tuple[str, str]] = field(default_factory=list)

    def clear(self) -> None:
        self.items = []


@dataclass
class SliderWidget:
    value: float = 100.0
    min: float = 0.0
    max: float = 100.0


@dataclass
class TooltipWidget:
    hidden: bool = True
    link_href: str = ""
    link_text: str = ""
    date_text: str = ""
    left: float = 0.0
    top: float = 0.0
    width: float = 280.0
    height: float = 90.0


@dataclass
class Widgets:
    stats: DefinitionListWidget | None = None
    selection_count: TextWidget | None = None
    language_breakdown: DefinitionListWidget | None = None
    tooltip: TooltipWidget | None = None
    slider: SliderWidget | None = None
    time_display: TextWidget | None = None
    file_distribution: DefinitionListWidget | None = None

    @classmethod
    def full(cls, tooltip_size: tuple[float, float] = (280.0, 90.0)) -> "Widgets":
        """Every widget present, as on the complete meta page."""
        width, height = tooltip_size
        return cls(
            stats=DefinitionListWidget(),
            selection_count=TextWidget(),
            language_breakdown=DefinitionListWidget(),
            tooltip=TooltipWidget(width=width, height=height),
            slider=SliderWidget(),
            time_display=TextWidget(),
            file_distribution=DefinitionListWidget(),
        )
