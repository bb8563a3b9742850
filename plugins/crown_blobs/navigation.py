"""
Navigation Collaborators

The core never performs a redirect itself. A click that lands on a blob
produces a NavigationRequest, which the Simulation hands to whichever
navigator the host installed.
"""

import webbrowser
from urllib.parse import urljoin


class NavigationRequest:
    """Request to navigate to a blob's target."""

    def __init__(self, target, label=""):
        self.target = target
        self.label = label

    def __eq__(self, other):
        if not isinstance(other, NavigationRequest):
            return NotImplemented
        return self.target == other.target and self.label == other.label

    def __hash__(self):
        return hash((self.target, self.label))

    def __repr__(self):
        return f"NavigationRequest({self.target!r}, label={self.label!r})"


class Navigator:
    """Base navigator: accepts requests and does nothing."""

    def navigate(self, request):
        pass


class RecordingNavigator(Navigator):
    """Keeps every request (headless runs and tests)."""

    def __init__(self):
        self.requests = []

    def navigate(self, request):
        self.requests.append(request)

    @property
    def last(self):
        return self.requests[-1] if self.requests else None


class PrintNavigator(Navigator):
    """Prints requests instead of following them."""

    def navigate(self, request):
        print(f"Navigate: {request.label} -> {request.target}")


class BrowserNavigator(Navigator):
    """Opens targets (resolved against base_url) in the system browser."""

    def __init__(self, base_url, new_tab=False):
        self.base_url = base_url
        self.new_tab = new_tab

    def resolve(self, target):
        return urljoin(self.base_url, target)

    def navigate(self, request):
        url = self.resolve(request.target)
        print(f"Opening {url}")
        webbrowser.open(url, new=2 if self.new_tab else 0)
