"""Unit tests for the discover view-model."""

import asyncio

from app.viewmodels.discover_vm import DEFAULT_QUERY, DiscoverVM
from core.errors import LocationError, PlacesError
from core.models import Coordinate, PlaceResult

HERE = Coordinate(35.0116, 135.7681)


class FakeLocation:
    def __init__(self, coordinate=HERE, error=None):
        self.coordinate = coordinate
        self.error = error

    async def request_current_location(self):
        if self.error:
            raise self.error
        return self.coordinate


class FakePlaces:
    def __init__(self, results=None, error=None, delay=0.0):
        self.results = results or []
        self.error = error
        self.delay = delay
        self.calls = []

    async def search(self, query, near, radius):
        self.calls.append((query, near, radius))
        results, error = list(self.results), self.error
        await asyncio.sleep(self.delay)
        if error:
            raise error
        return results


class FakePhotos:
    async def find_place_photo(self, name):
        return f"https://photos.example/{name}"


def _places(*names):
    return [PlaceResult(name=n, coordinate=HERE, description=f"{n} desc") for n in names]


def test_refresh_builds_spots():
    places = FakePlaces(results=_places("Kinkaku-ji", "Fushimi Inari"))
    vm = DiscoverVM(FakeLocation(), places, FakePhotos(), radius=1500)

    spots = asyncio.run(vm.refresh())

    assert [s.name for s in spots] == ["Kinkaku-ji", "Fushimi Inari"]
    assert spots[0].image_url == "https://photos.example/Kinkaku-ji"
    assert spots[1].description == "Fushimi Inari desc"
    assert places.calls == [(DEFAULT_QUERY, HERE, 1500)]
    assert vm.location == HERE
    assert not vm.is_loading
    assert vm.error_message is None


def test_location_failure_sets_status_text():
    vm = DiscoverVM(FakeLocation(error=LocationError("denied")), FakePlaces(), FakePhotos())
    assert asyncio.run(vm.refresh()) == []
    assert vm.error_message == "Unable to determine your location: denied"
    assert not vm.is_loading


def test_search_failure_sets_status_text():
    vm = DiscoverVM(FakeLocation(), FakePlaces(error=PlacesError("offline")), FakePhotos())
    asyncio.run(vm.refresh())
    assert vm.error_message == "Error searching for nearby places: offline"


def test_newer_refresh_supersedes_older():
    slow = FakePlaces(results=_places("Old"), delay=0.05)
    vm = DiscoverVM(FakeLocation(), slow, FakePhotos())

    async def scenario():
        first = asyncio.create_task(vm.refresh())
        await asyncio.sleep(0)
        slow.results = _places("New")
        slow.delay = 0.0
        await vm.refresh()
        await first

    asyncio.run(scenario())
    assert [s.name for s in vm.spots] == ["New"]
