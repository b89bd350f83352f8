"""Integration tests for the Ekart adapter with the HTTP layer mocked."""

from unittest.mock import MagicMock, patch

import pytest
import requests
from tracking.carrier import get_carrier_tracker, reset_carrier_tracker, set_carrier_tracker
from tracking.carrier.detection import Carrier
from tracking.carrier.ekart import EKART_TRACKING_URL, EkartTracker
from tracking.carrier.fake_adapter import FakeCarrierTracker


def _response(status=200, payload=None, json_error=False):
    response = MagicMock()
    response.ok = status < 400
    response.status_code = status
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = payload
    return response


class TestEkartTracker:
    @patch("tracking.carrier.ekart.requests.get")
    def test_maps_report(self, mock_get):
        mock_get.return_value = _response(
            payload={
                "currentStatus": "In Transit",
                "statusDetails": "Departed Bhiwandi hub",
                "lastUpdate": "2024-01-02T08:00:00+05:30",
                "currentLocation": "Bhiwandi",
                "deliveryDate": "2024-01-04",
                "events": [{"status": "Picked up", "location": "Mumbai"}],
            }
        )

        report = EkartTracker().fetch("FMPP1234567", Carrier.EKART)

        assert report.current_status == "In Transit"
        assert report.status_details == "Departed Bhiwandi hub"
        assert report.current_location == "Bhiwandi"
        assert report.delivery_date == "2024-01-04"
        assert report.events == [{"status": "Picked up", "location": "Mumbai"}]
        mock_get.assert_called_once()
        assert mock_get.call_args.args[0] == EKART_TRACKING_URL
        assert mock_get.call_args.kwargs["params"] == {"trackingId": "FMPP1234567"}

    @patch("tracking.carrier.ekart.requests.get")
    def test_other_carriers_are_not_queried(self, mock_get):
        assert EkartTracker().fetch("12345678901", Carrier.DELHIVERY) is None
        mock_get.assert_not_called()

    @pytest.mark.parametrize(
        "response",
        [
            _response(status=404),
            _response(json_error=True),
            _response(payload={}),
            _response(payload={"currentStatus": ""}),
        ],
    )
    def test_unusable_answers(self, response):
        with patch("tracking.carrier.ekart.requests.get", return_value=response):
            assert EkartTracker().fetch("FMPP1", Carrier.EKART) is None

    @patch("tracking.carrier.ekart.requests.get", side_effect=requests.ConnectionError("refused"))
    def test_unreachable(self, mock_get):
        assert EkartTracker().fetch("FMPP1", Carrier.EKART) is None


class TestCarrierRegistry:
    def test_default_is_fake(self):
        reset_carrier_tracker()
        assert isinstance(get_carrier_tracker(), FakeCarrierTracker)

    def test_ekart_selected_by_settings(self):
        from shared.config import Settings, set_settings

        set_settings(Settings(adapters={"carrier": "ekart"}))
        reset_carrier_tracker()
        assert isinstance(get_carrier_tracker(), EkartTracker)

    def test_unknown_adapter(self):
        from shared.config import Settings, set_settings

        set_settings(Settings(adapters={"carrier": "pigeon"}))
        reset_carrier_tracker()
        with pytest.raises(ValueError):
            get_carrier_tracker()

    def test_set_overrides(self):
        tracker = EkartTracker(timeout=1)
        set_carrier_tracker(tracker)
        assert get_carrier_tracker() is tracker
