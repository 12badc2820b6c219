"""
Historical observation sites and contact timings for the 1761 and 1769
transits of Venus.

The roster is static reference data; every object here is immutable.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

import pytz

from ..config import HISTORICAL_ACCURACY, DEFAULT_HISTORICAL_ACCURACY, SECONDS_PER_HOUR
from ..exceptions import UnknownTransitYearError
from ..physics.geodesy import GeodeticLocation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContactTimes:
    """The four contacts of Venus with the solar limb (UTC)."""
    first: datetime
    second: datetime
    third: datetime
    fourth: datetime

    def as_tuple(self) -> Tuple[datetime, datetime, datetime, datetime]:
        return (self.first, self.second, self.third, self.fourth)

    @property
    def duration(self) -> timedelta:
        """Time from external ingress to external egress."""
        return self.fourth - self.first

    def contains(self, when: datetime) -> bool:
        """True if ``when`` lies within [first, fourth] contact."""
        return self.first <= when <= self.fourth


@dataclass(frozen=True)
class ObservationSite:
    """An observing station, identified by its id."""
    id: str
    name: str
    location: GeodeticLocation
    telescope: str = ""
    observer: str = ""
    contact_times: Optional[ContactTimes] = None
    accuracy: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class TransitEvent:
    """One transit of Venus and the instant used to triangulate it."""
    year: int
    reference_time: datetime
    contacts: ContactTimes
    duration_hours: float
    historical_accuracy: str


def _utc(year: int, month: int, day: int, hour: int, minute: int) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=pytz.utc)


def _contacts(year: int, month: int, day: int) -> ContactTimes:
    return ContactTimes(
        first=_utc(year, month, day, 2, 19),
        second=_utc(year, month, day, 2, 39),
        third=_utc(year, month, day, 8, 37),
        fourth=_utc(year, month, day, 8, 57),
    )


_CONTACTS_1761 = _contacts(1761, 6, 6)
_CONTACTS_1769 = _contacts(1769, 6, 3)

_ROSTERS: Dict[int, Tuple[ObservationSite, ...]] = {
    1761: (
        ObservationSite(
            id='stockholm_1761',
            name='Stockholm Observatory',
            location=GeodeticLocation(59.3293, 18.0686, 28.0),
            telescope='8-foot refractor',
            observer='Pehr Wilhelm Wargentin',
            contact_times=_CONTACTS_1761,
            accuracy='±2 minutes',
            notes='Royal Swedish Academy of Sciences, good weather'
        ),
        ObservationSite(
            id='paris_1761',
            name='Paris Observatory',
            location=GeodeticLocation(48.8566, 2.3522, 35.0),
            telescope='12-foot quadrant',
            observer='Joseph-Nicolas Delisle',
            contact_times=_CONTACTS_1761,
            accuracy='±1 minute',
            notes='Large campaign led by the French Academy of Sciences'
        ),
        ObservationSite(
            id='cape_town_1761',
            name='Cape of Good Hope',
            location=GeodeticLocation(-33.9249, 18.4241, 15.0),
            telescope='4-foot mural quadrant',
            observer='Nicolas-Louis de Lacaille',
            contact_times=_CONTACTS_1761,
            accuracy='±3 minutes',
            notes='Key southern hemisphere station'
        ),
    ),
    1769: (
        ObservationSite(
            id='tahiti_1769',
            name='Tahiti',
            location=GeodeticLocation(-17.6509, -149.4260, 5.0),
            telescope='Dollond 30-inch achromatic',
            observer='James Cook',
            contact_times=_CONTACTS_1769,
            accuracy='±1 minute',
            notes='Endeavour expedition, excellent conditions'
        ),
        ObservationSite(
            id='hudson_bay_1769',
            name='Hudson Bay',
            location=GeodeticLocation(58.7683, -94.1650, 50.0),
            telescope='Bird 30-inch quadrant',
            observer='William Wales',
            contact_times=_CONTACTS_1769,
            accuracy='±2 minutes',
            notes='Royal Society northern station'
        ),
        ObservationSite(
            id='vienna_1769',
            name='Vienna Observatory',
            location=GeodeticLocation(48.2082, 16.3738, 170.0),
            telescope='6-foot mural quadrant',
            observer='Maximilian Hell',
            contact_times=_CONTACTS_1769,
            accuracy='±1.5 minutes',
            notes='Imperial Academy of Sciences, Vienna'
        ),
    ),
}

_EVENTS: Dict[int, TransitEvent] = {
    year: TransitEvent(
        year=year,
        reference_time=contacts.first.replace(hour=5, minute=30),
        contacts=contacts,
        duration_hours=contacts.duration.total_seconds() / SECONDS_PER_HOUR,
        historical_accuracy=HISTORICAL_ACCURACY.get(year, DEFAULT_HISTORICAL_ACCURACY)
    )
    for year, contacts in ((1761, _CONTACTS_1761), (1769, _CONTACTS_1769))
}


def available_years() -> List[int]:
    """Transit years with a historical roster."""
    return sorted(_ROSTERS)


def historical_sites(year: int) -> List[ObservationSite]:
    """
    Observation sites of a transit year, in roster order.

    Raises:
        UnknownTransitYearError: If no roster exists for ``year``.
    """
    try:
        return list(_ROSTERS[year])
    except KeyError:
        raise UnknownTransitYearError(
            f"No historical roster for {year}. Available years: {available_years()}"
        ) from None


def transit_event(year: int) -> TransitEvent:
    """
    Transit description of a year.

    Raises:
        UnknownTransitYearError: If no roster exists for ``year``.
    """
    try:
        return _EVENTS[year]
    except KeyError:
        raise UnknownTransitYearError(
            f"No transit event recorded for {year}. Available years: {available_years()}"
        ) from None

