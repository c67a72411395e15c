"""Provider-specific state and province id tables."""
from types import MappingProxyType


class UnknownStateError(ValueError):
    """State code missing from a strict provider table."""


_US_STATES = [
    ("AL", "Alabama"), ("AK", "Alaska"), ("AZ", "Arizona"), ("AR", "Arkansas"),
    ("CA", "California"), ("CO", "Colorado"), ("CT", "Connecticut"), ("DE", "Delaware"),
    ("DC", "District of Columbia"), ("FL", "Florida"), ("GA", "Georgia"), ("HI", "Hawaii"),
    ("ID", "Idaho"), ("IL", "Illinois"), ("IN", "Indiana"), ("IA", "Iowa"),
    ("KS", "Kansas"), ("KY", "Kentucky"), ("LA", "Louisiana"), ("ME", "Maine"),
    ("MD", "Maryland"), ("MA", "Massachusetts"), ("MI", "Michigan"), ("MN", "Minnesota"),
    ("MS", "Mississippi"), ("MO", "Missouri"), ("MT", "Montana"), ("NE", "Nebraska"),
    ("NV", "Nevada"), ("NH", "New Hampshire"), ("NJ", "New Jersey"), ("NM", "New Mexico"),
    ("NY", "New York"), ("NC", "North Carolina"), ("ND", "North Dakota"), ("OH", "Ohio"),
    ("OK", "Oklahoma"), ("OR", "Oregon"), ("PA", "Pennsylvania"), ("RI", "Rhode Island"),
    ("SC", "South Carolina"), ("SD", "South Dakota"), ("TN", "Tennessee"), ("TX", "Texas"),
    ("UT", "Utah"), ("VT", "Vermont"), ("VA", "Virginia"), ("WA", "Washington"),
    ("WV", "West Virginia"), ("WI", "Wisconsin"), ("WY", "Wyoming"),
]

# T2 portals number the 50 states plus DC alphabetically by full name
PORTAL_STATE_IDS = MappingProxyType(
    {code: str(index) for index, (code, _) in enumerate(_US_STATES, start=1)}
)

_RMCPAY_IDS = [
    ("AL", "Alabama", "81"), ("AK", "Alaska", "82"), ("AZ", "Arizona", "83"),
    ("AR", "Arkansas", "84"), ("CA", "California", "85"), ("CO", "Colorado", "86"),
    ("CT", "Connecticut", "87"), ("DE", "Delaware", "88"), ("DC", "District of Columbia", "131"),
    ("FL", "Florida", "89"), ("GA", "Georgia", "90"), ("GU", "Guam", "663"),
    ("HI", "Hawaii", "91"), ("ID", "Idaho", "92"), ("IL", "Illinois", "93"),
    ("IN", "Indiana", "94"), ("IA", "Iowa", "95"), ("KS", "Kansas", "96"),
    ("KY", "Kentucky", "97"), ("LA", "Louisiana", "98"), ("ME", "Maine", "99"),
    ("MD", "Maryland", "100"), ("MA", "Massachusetts", "101"), ("MI", "Michigan", "102"),
    ("MN", "Minnesota", "103"), ("MS", "Mississippi", "104"), ("MO", "Missouri", "105"),
    ("MT", "Montana", "106"), ("NE", "Nebraska", "107"), ("NV", "Nevada", "108"),
    ("NH", "New Hampshire", "109"), ("NJ", "New Jersey", "110"), ("NM", "New Mexico", "111"),
    ("NY", "New York", "112"), ("NC", "North Carolina", "113"), ("ND", "North Dakota", "114"),
    ("OH", "Ohio", "115"), ("OK", "Oklahoma", "116"), ("OR", "Oregon", "117"),
    ("PA", "Pennsylvania", "118"), ("PR", "Puerto Rico", "495"), ("RI", "Rhode Island", "119"),
    ("SC", "South Carolina", "120"), ("SD", "South Dakota", "121"), ("TN", "Tennessee", "122"),
    ("TX", "Texas", "123"), ("UT", "Utah", "124"), ("VT", "Vermont", "125"),
    ("VI", "Virgin Islands", "613"), ("VA", "Virginia", "126"), ("WA", "Washington", "127"),
    ("WV", "West Virginia", "128"), ("WI", "Wisconsin", "129"), ("WY", "Wyoming", "130"),
    # Canada
    ("AB", "Alberta", "193"), ("BC", "British Columbia", "194"), ("MB", "Manitoba", "195"),
    ("NB", "New Brunswick", "196"), ("NL", "Newfoundland and Labrador", "197"),
    ("NT", "Northwest Territories", "198"), ("NS", "Nova Scotia", "199"),
    ("NU", "Nunavut", "200"), ("ON", "Ontario", "201"), ("PE", "Prince Edward Island", "202"),
    ("QC", "Quebec", "203"), ("SK", "Saskatchewan", "204"), ("YT", "Yukon", "205"),
]

# Keys upper-cased; lookups are case-insensitive on abbreviation or full name
RMCPAY_STATE_IDS = MappingProxyType(
    {key.upper(): state_id for code, name, state_id in _RMCPAY_IDS for key in (code, name)}
)


def portal_state_id(code: str) -> str:
    """Strict T2 portal id for a two-letter code."""
    key = (code or "").strip().upper()
    try:
        return PORTAL_STATE_IDS[key]
    except KeyError:
        raise UnknownStateError(f"Invalid state code: {code}") from None


def rmcpay_state_id(state: str) -> str:
    """RmcPay id; unmapped input is passed through unchanged."""
    if not state:
        return state
    return RMCPAY_STATE_IDS.get(state.strip().upper(), state)
