from typing import Optional

from .base import DetailMode, DetailView
from .dynamic import DynamicView
from .file import FileView
from .sections import SectionView
from .symbols import SymbolView

DETAIL_VIEWS = [
    FileView(),
    SymbolView(),
    DynamicView(),
    SectionView(),
]


def detail_view(mode: DetailMode) -> Optional[DetailView]:
    """Returns the view registered for a detail mode."""
    for view in DETAIL_VIEWS:
        if view.mode == mode:
            return view

    return None
