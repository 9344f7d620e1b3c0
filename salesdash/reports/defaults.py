"""
Default Dashboard Dataset

The fixed report the store falls back to when nothing (or nothing valid)
has been saved, and what a reset restores.
"""

from functools import lru_cache

from salesdash.reports.models import ChannelInput, ChannelName, SalesReport, WebsiteInput
from salesdash.transformation.aggregation import build_branch, recompute_website_edit

# (name, localized name, [(channel, sales, orders), ...])
_BRANCHES = [
    ("Maadi", "المعادي", [
        (ChannelName.CALL_CENTRE, 139322.55, 198),
        (ChannelName.INSTASHOP, 270006.16, 536),
        (ChannelName.TALABAT, 240079.0, 695),
    ]),
    ("Heliopolis", "مصر الجديدة", [
        (ChannelName.CALL_CENTRE, 226896.76, 335),
        (ChannelName.INSTASHOP, 332023.66, 631),
        (ChannelName.TALABAT, 389231.71, 1197),
    ]),
    ("Tagamoa", "التجمع", [
        (ChannelName.CALL_CENTRE, 173787.06, 230),
        (ChannelName.INSTASHOP, 314532.0, 581),
        (ChannelName.TALABAT, 273711.53, 817),
    ]),
    ("Dark", "Dark Store", [
        (ChannelName.CALL_CENTRE, 221016.15, 386),
        (ChannelName.INSTASHOP, 339310.0, 724),
        (ChannelName.TALABAT, 618680.25, 1994),
    ]),
]

_WEBSITE = WebsiteInput(
    visits=23000,
    total_orders=206,
    completed_orders=184,
    cancelled_orders=22,
    total_sales=135591.82,
    cancelled_value=11695.9,
)


@lru_cache()
def default_report() -> SalesReport:
    """Default dataset with every derived field computed"""
    branches = [
        build_branch(
            name,
            localized_name,
            [ChannelInput(name=channel, sales=sales, orders=orders) for channel, sales, orders in channels],
        )
        for name, localized_name, channels in _BRANCHES
    ]
    return SalesReport(branches=branches, website=recompute_website_edit(_WEBSITE))
