from core.models import FieldBlock, Matchday, TimeSlot

DEFAULT_FIELDS = [
    {'name': 'Field 1', 'bg': '#f4cccc'},
    {'name': 'Field 2', 'bg': '#d9d2e9'},
    {'name': 'Field 3', 'bg': '#cfe1f3'},
]
DEFAULT_TIMES = ['9:00', '10:30']
DEFAULT_TIERS = ['Rec', 'Flex', 'Comp']


def default_matchday():
    """A new matchday prefilled with the standard fields and times, teams unset.

    The date is left blank on purpose; it is set when the matchday is booked.
    """
    fields = [
        FieldBlock(name=f['name'], bg_color=f['bg'], times=[TimeSlot(label) for label in DEFAULT_TIMES])
        for f in DEFAULT_FIELDS
    ]
    return Matchday(date=None, fields=fields)
