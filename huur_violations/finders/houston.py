"""City of Houston parking citations."""
from huur_violations.finders.portal import PortalFinder


class CityOfHoustonFinder(PortalFinder):
    key = "houston"
    name = "City of Houston"
    link = "https://houstonparking.t2hosted.com"
