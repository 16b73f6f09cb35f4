import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict

from src.flight_network.application import FlightNetwork
from src.flight_network.config import Settings, load_settings
from src.flight_network.exceptions import (
    DuplicateKeyError,
    FlightNetworkError,
    InvalidReferenceError,
    NetworkNotInitializedError,
    NotFoundError,
)
from src.flight_network.schemas.entities import Airline, Airport, Route
from src.flight_network.services.network_service import NetworkService

logger = logging.getLogger(__name__)


# --- Pydantic Schemas (The JSON Contract) ---
# from_attributes lets these read straight from the frozen dataclasses.


class AirlineSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    iata: str
    name: str
    country: str
    active: bool


class AirportSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    iata: str
    name: str
    city: str
    country: str
    latitude: float
    longitude: float


class AirlineRefSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    iata: str
    name: str


class AirportRefSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    iata: str
    name: str
    city: str
    country: str


class ServedAirportSchema(BaseModel):
    airport_id: int
    iata: str
    name: str
    city: str
    country: str
    route_count: int


class ServingAirlineSchema(BaseModel):
    airline_id: int
    iata: str
    name: str
    country: str
    route_count: int


class AirlineRoutesResponse(BaseModel):
    airline: AirlineRefSchema
    airports: List[ServedAirportSchema]


class AirportRoutesResponse(BaseModel):
    airport: AirportRefSchema
    airlines: List[ServingAirlineSchema]


class AirlineListResponse(BaseModel):
    airlines: List[AirlineSchema]


class AirportListResponse(BaseModel):
    airports: List[AirportSchema]


class OneHopRouteSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    via: AirportRefSchema
    leg1_miles: float
    leg2_miles: float
    total_miles: float  # Captures @property
    airline1: Optional[AirlineRefSchema] = None
    airline2: Optional[AirlineRefSchema] = None


class OneHopResponse(BaseModel):
    source: AirportRefSchema
    destination: AirportRefSchema
    routes: List[OneHopRouteSchema]


class RouteSchema(BaseModel):
    airline_id: int
    src_id: int
    dst_id: int
    stops: int


class AirlineWriteResponse(BaseModel):
    status: str = "ok"
    message: str
    airline: AirlineSchema


class AirportWriteResponse(BaseModel):
    status: str = "ok"
    message: str
    airport: AirportSchema


class RouteWriteResponse(BaseModel):
    status: str = "ok"
    message: str
    route: RouteSchema


# --- Request bodies ---


class AirlineAddRequest(BaseModel):
    id: int
    iata: str
    name: str
    country: str = ""
    active: bool = True


class AirlineUpdateRequest(BaseModel):
    id: int
    iata: Optional[str] = None
    name: Optional[str] = None
    country: Optional[str] = None
    active: Optional[bool] = None


class AirportAddRequest(BaseModel):
    id: int
    iata: str
    name: str
    city: str = ""
    country: str = ""
    latitude: float = 0.0
    longitude: float = 0.0


class AirportUpdateRequest(BaseModel):
    id: int
    iata: Optional[str] = None
    name: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class RouteAddRequest(BaseModel):
    airline_id: int
    src_id: int
    dst_id: int
    stops: int = 0


# --- Dependencies ---


def get_service(request: Request) -> NetworkService:
    network: Optional[FlightNetwork] = getattr(request.app.state, "network", None)
    if network is None:
        raise NetworkNotInitializedError("Flight network is not loaded")
    return network.service


def _require(value: Optional[str], name: str) -> str:
    if not value:
        raise HTTPException(status_code=400, detail=f"Missing '{name}' query parameter")
    return value


# --- Error mapping ---

ERROR_STATUS = {
    DuplicateKeyError: 400,
    InvalidReferenceError: 400,
    NotFoundError: 404,
    NetworkNotInitializedError: 503,
}


async def flight_network_error_handler(request: Request, exc: FlightNetworkError) -> JSONResponse:
    status_code = ERROR_STATUS.get(type(exc), 500)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed or incomplete bodies are client errors, reported as 400
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


# --- App factory ---


def create_app(
    network: Optional[FlightNetwork] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the HTTP app around one shared FlightNetwork.

    When no network is passed, it is loaded from the configured data files
    at startup. Handlers are plain (sync) functions, so the server runs
    them on its worker thread pool against the shared store.
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.network is None:
            app.state.network = FlightNetwork.from_settings(settings)
        yield

    app = FastAPI(title="Flight Network API", lifespan=lifespan)
    app.state.network = network
    app.state.settings = settings

    app.add_exception_handler(FlightNetworkError, flight_network_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

    # --- Pages ---

    @app.get("/", response_class=HTMLResponse)
    def index():
        index_file = static_dir / "index.html"
        if not index_file.exists():
            raise HTTPException(status_code=500, detail="index.html not found in /static")
        return HTMLResponse(index_file.read_text(encoding="utf-8"))

    # --- Lookups ---

    @app.get("/airline", response_model=AirlineSchema)
    def get_airline(iata: Optional[str] = None, service: NetworkService = Depends(get_service)):
        return AirlineSchema.model_validate(service.lookup_airline_by_iata(_require(iata, "iata")))

    @app.get("/airport", response_model=AirportSchema)
    def get_airport(iata: Optional[str] = None, service: NetworkService = Depends(get_service)):
        return AirportSchema.model_validate(service.lookup_airport_by_iata(_require(iata, "iata")))

    @app.get("/airline-routes", response_model=AirlineRoutesResponse)
    def get_airline_routes(iata: Optional[str] = None, service: NetworkService = Depends(get_service)):
        airline, served = service.airline_routes_by_iata(_require(iata, "iata"))
        return {
            "airline": AirlineRefSchema.model_validate(airline),
            "airports": [
                {
                    "airport_id": s.airport.id,
                    "iata": s.airport.iata,
                    "name": s.airport.name,
                    "city": s.airport.city,
                    "country": s.airport.country,
                    "route_count": s.route_count,
                }
                for s in served
            ],
        }

    @app.get("/airport-routes", response_model=AirportRoutesResponse)
    def get_airport_routes(iata: Optional[str] = None, service: NetworkService = Depends(get_service)):
        airport, serving = service.airport_routes_by_iata(_require(iata, "iata"))
        return {
            "airport": AirportRefSchema.model_validate(airport),
            "airlines": [
                {
                    "airline_id": s.airline.id,
                    "iata": s.airline.iata,
                    "name": s.airline.name,
                    "country": s.airline.country,
                    "route_count": s.route_count,
                }
                for s in serving
            ],
        }

    @app.get("/airlines-by-iata", response_model=AirlineListResponse)
    def list_airlines(service: NetworkService = Depends(get_service)):
        return {"airlines": [AirlineSchema.model_validate(a) for a in service.all_airlines_sorted_by_iata()]}

    @app.get("/airports-by-iata", response_model=AirportListResponse)
    def list_airports(service: NetworkService = Depends(get_service)):
        return {"airports": [AirportSchema.model_validate(a) for a in service.all_airports_sorted_by_iata()]}

    # --- In-memory updates ---

    @app.post("/airline-add", response_model=AirlineWriteResponse)
    def add_airline(body: AirlineAddRequest, service: NetworkService = Depends(get_service)):
        airline = service.insert_airline(Airline(**body.model_dump()))
        return {"message": "Airline added in memory", "airline": AirlineSchema.model_validate(airline)}

    @app.post("/airline-update", response_model=AirlineWriteResponse)
    def update_airline(body: AirlineUpdateRequest, service: NetworkService = Depends(get_service)):
        fields = body.model_dump(exclude_unset=True, exclude_none=True, exclude={"id"})
        airline = service.update_airline(body.id, **fields)
        return {"message": "Airline updated in memory", "airline": AirlineSchema.model_validate(airline)}

    @app.post("/airport-add", response_model=AirportWriteResponse)
    def add_airport(body: AirportAddRequest, service: NetworkService = Depends(get_service)):
        airport = service.insert_airport(Airport(**body.model_dump()))
        return {"message": "Airport added in memory", "airport": AirportSchema.model_validate(airport)}

    @app.post("/airport-update", response_model=AirportWriteResponse)
    def update_airport(body: AirportUpdateRequest, service: NetworkService = Depends(get_service)):
        fields = body.model_dump(exclude_unset=True, exclude_none=True, exclude={"id"})
        airport = service.update_airport(body.id, **fields)
        return {"message": "Airport updated in memory", "airport": AirportSchema.model_validate(airport)}

    @app.post("/route-add", response_model=RouteWriteResponse)
    def add_route(body: RouteAddRequest, service: NetworkService = Depends(get_service)):
        route = service.insert_route(
            Route(
                airline_id=body.airline_id,
                source_id=body.src_id,
                destination_id=body.dst_id,
                stops=body.stops,
            )
        )
        return {
            "message": "Route added in memory",
            "route": {
                "airline_id": route.airline_id,
                "src_id": route.source_id,
                "dst_id": route.destination_id,
                "stops": route.stops,
            },
        }

    # --- One-hop report (S -> X -> D, 0 stops) ---

    @app.get("/one-hop", response_model=OneHopResponse, response_model_exclude_none=True)
    def one_hop(
        src: Optional[str] = None,
        dst: Optional[str] = None,
        service: NetworkService = Depends(get_service),
    ):
        if not src or not dst:
            raise HTTPException(status_code=400, detail="Missing 'src' or 'dst' query parameter")
        source, destination, itineraries = service.one_hop_by_iata(src, dst)
        return OneHopResponse(
            source=AirportRefSchema.model_validate(source),
            destination=AirportRefSchema.model_validate(destination),
            routes=[OneHopRouteSchema.model_validate(i) for i in itineraries],
        )

    return app


app = create_app()
