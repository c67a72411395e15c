"""City of Fort Lauderdale parking citations."""
from huur_violations.finders.portal import PortalFinder


class CityOfFortLauderdaleFinder(PortalFinder):
    key = "fort_lauderdale"
    name = "City of Fort Lauderdale"
    link = "https://fortlauderdaleparking.t2hosted.com"
