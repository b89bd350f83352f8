"""Fake postal lookup with a small fixed directory."""

from checkout.address.port import PostalLocation, PostalLookupPort

_DIRECTORY = {
    "110001": PostalLocation(city="New Delhi", province="Delhi"),
    "400001": PostalLocation(city="Mumbai", province="Maharashtra"),
    "560001": PostalLocation(city="Bangalore", province="Karnataka"),
    "600001": PostalLocation(city="Chennai", province="Tamil Nadu"),
}


class FakePostalLookup(PostalLookupPort):
    def __init__(self, directory: dict[str, PostalLocation] | None = None) -> None:
        self.directory = dict(_DIRECTORY if directory is None else directory)
        self.calls: list[str] = []

    def lookup(self, postal_code: str) -> PostalLocation | None:
        self.calls.append(postal_code)
        return self.directory.get(postal_code)
