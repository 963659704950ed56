import unittest
from unittest.mock import MagicMock

from requests.exceptions import ConnectionError, Timeout

from fleetops.clients.driver_client import DriverClient, InMemoryDriverLookup
from fleetops.utils.exceptions import InternalServerException


def client_returning(status_code=None, error=None):
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = MagicMock(status_code=status_code)
    return DriverClient("http://drivers.local/", timeout=2.5, session=session), session


class TestDriverClient(unittest.TestCase):
    def test_found_driver(self):
        client, session = client_returning(200)
        self.assertTrue(client.exists("GODE561231HDFRRN09"))
        session.get.assert_called_once_with(
            "http://drivers.local/driver/get/GODE561231HDFRRN09", timeout=2.5,
        )

    def test_curp_is_encoded_as_a_single_path_segment(self):
        client, session = client_returning(404)
        self.assertFalse(client.exists("REALCURP?x=FAKE"))
        self.assertFalse(client.exists("FAKE/../REALCURP"))
        urls = [c.args[0] for c in session.get.call_args_list]
        self.assertEqual(urls, [
            "http://drivers.local/driver/get/REALCURP%3Fx%3DFAKE",
            "http://drivers.local/driver/get/FAKE%2F..%2FREALCURP",
        ])

    def test_missing_driver(self):
        client, _ = client_returning(404)
        self.assertFalse(client.exists("NOBODY"))

    def test_server_error_is_internal_error(self):
        client, _ = client_returning(503)
        with self.assertRaises(InternalServerException) as ctx:
            client.exists("GODE561231HDFRRN09")
        self.assertEqual(ctx.exception.status_code, 500)

    def test_transport_errors_are_internal_errors(self):
        for error in (ConnectionError("refused"), Timeout("slow")):
            client, _ = client_returning(error=error)
            with self.assertRaises(InternalServerException):
                client.exists("GODE561231HDFRRN09")


class TestInMemoryDriverLookup(unittest.TestCase):
    def test_exists(self):
        lookup = InMemoryDriverLookup(["A", "B"])
        self.assertTrue(lookup.exists("A"))
        self.assertFalse(lookup.exists("C"))


if __name__ == "__main__":
    unittest.main()
