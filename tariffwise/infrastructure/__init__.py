"""Infrastructure layer: integrations with the tariff backend and the auth provider.

Everything that talks over the network lives here. Domain and UI modules receive
clients from this layer instead of building HTTP requests themselves.
"""
