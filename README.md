# svcgateway

`svcgateway` is a small HTTP API gateway. It reads service descriptions from
a directory of `.svc` files and forwards JSON calls from clients to the REST
services they describe. A load balancer picks the backend address for each
call. A background heartbeat checks the backends. Protected routes need a
JWT, and requests are rate-limited per client address.

## Running

Once the package is installed, start the gateway with:

```
svcgateway
```

The command takes no options. It serves until it gets SIGINT (Ctrl+C). Then it
stops the heartbeat, shuts the server down and exits with status 0. If the
server cannot start, for example because the address has no port or is in
use, the command logs the error and exits with status 1.

Settings come from environment variables:

| Variable             | Meaning                                                   | Default  |
|----------------------|-----------------------------------------------------------|----------|
| `GATEWAY_ADDRESS`    | Address to listen on, `host:port` or `:port`              | `:8080`  |
| `REGISTRY_DIRECTORY` | Directory that holds the `.svc` service definitions       | (empty)  |
| `JWT_SECRET`         | HMAC secret used to sign and check tokens (HS256)         | required |
| `GATEWAY_USER`       | User name accepted by `/login`                            | (empty)  |
| `GATEWAY_PASSWORD`   | Password accepted by `/login`                             | (empty)  |

If the address has an empty host, such as `:8080`, the gateway listens on all
interfaces. Log lines go to standard error in this form:

```
[15:04:05] [INFO] [gateway] [127.0.0.1] GET /healthz 200
```

Every request is logged with its method, path and status.

## Service definitions

Every file ending in `.svc` in the registry directory describes one service.
Files are read in name order. If two files give the same `name`, the later
one wins. A file that cannot be read or parsed is logged and skipped.

Blank lines and lines that start with `#` are ignored. A value goes either on
the same line as its key or in a list of `- ` items on the lines below it:

```
# users.svc
name: users
replicas: 2
addresses:
  - 127.0.0.1:9001
  - 127.0.0.1:9002
api_type: REST
endpoints:
  - GET /users
  - POST /users
  - /status
health_endpoint: /healthz
```

- `name` is the key that clients use to reach the service.
- `addresses` lists the backends as `host:port`.
- `replicas` is an integer. A value that is not a number is ignored.
- `api_type` is `REST` or `GRPC`. Any other value counts as `GRPC`.
- `endpoints` are written as `METHOD /path`. An entry that is not exactly
  two space-separated words, such as the bare path `/status`, is exposed for
  `GET`, `POST`, `PUT`, `PATCH` and `DELETE`.
- `health_endpoint` is the path that the heartbeat polls on every address.
- Any other key is ignored.

You can also use the parser on its own:

```python
from svcgateway.parser import parse_file, parse_text

service = parse_file("services/users.svc")
print(service.name, service.addresses)

service = parse_text("name: users\naddresses:\n  - 127.0.0.1:9001\n")
```

A malformed definition raises `svcgateway.parser.ParseError`, which is a
subclass of `ValueError`.

## HTTP interface

| Route            | Auth | Purpose                                             |
|------------------|------|-----------------------------------------------------|
| `GET /healthz`   | no   | Returns 200                                         |
| `GET /metrics`   | no   | Request and service-call counters, text exposition  |
| `POST /login`    | no   | Exchanges user and password for a one-hour JWT      |
| `GET /reload`    | yes  | Re-reads the registry directory                     |
| `GET /services`  | yes  | Lists the registered services as JSON               |
| `POST /call`     | yes  | Forwards a call to a service                        |

An unknown path gets `404`. A known path with the wrong method gets `405`.

### Login

```
POST /login
Content-Type: application/json

{"username": "admin", "password": "password"}
```

If both fields match `GATEWAY_USER` and `GATEWAY_PASSWORD`, the reply is
`{"token": "..."}`. The token is signed with HS256, has subject set to the
user name and issuer `gateway`, and expires after one hour. Wrong credentials
get `401`. A body that is not a JSON object gets `400`. If `JWT_SECRET` is
unset, the reply is `500`.

Protected routes need the token in an `Authorization: Bearer token` header.
A missing header, an invalid token or an expired token gets `401`.

### Services

`GET /services` returns an object keyed by service name. Each entry has the
fields `Name`, `Replicas`, `Addresses`, `APIType`, `Endpoints` and
`HealthEndpoint`. An empty address or endpoint list shows as `null`.

`GET /reload` re-reads the registry directory and rebuilds the load balancer
for the new set of services.

### Calls

A call names the service, one of its endpoints as it appears in the
definition, and the parameters:

```
POST /call
Authorization: Bearer token
Content-Type: application/json

{"type": "rest", "service": "users", "endpoint": "POST /users", "params": {"name": "ada"}}
```

For methods other than `GET`, the `params` are sent as the JSON request body.
The JSON object that the backend returns is passed back to the client.
Before each call the gateway requests `/healthz` on the chosen backend.

| Outcome                                                        | Status |
|----------------------------------------------------------------|--------|
| Body is not a JSON object, or a field has the wrong type       | `400`  |
| `type` is anything other than `rest`                           | `400`  |
| Unknown service                                                | `404`  |
| Backend's `/healthz` does not answer 200                       | `404`  |
| Unknown endpoint, connection failure, or non-object JSON reply | `500`  |

Each successful call counts toward the `service_calls` metric.

### Rate limiting

Each client address (`REMOTE_ADDR`) gets one request per second, with a
burst of ten. Requests beyond that get `429 Too Many Requests`. The limiter
is `svcgateway.middleware.RateLimiter`, built on `TokenBucket`.

## Load balancing

If a service has exactly one address, that address is used. Otherwise
`svcgateway.balancer.LoadBalancer` chooses one. The gateway uses
`BalancerMode.ROUND_ROBIN`. In `BalancerMode.LEAST_RESPONSE_TIME` the
balancer picks the address with the lowest last recorded response time. The
gateway records each call's duration with `record_response_time`.

## Heartbeat

`svcgateway.heartbeat.HeartbeatManager` polls every address's
`health_endpoint` once a minute, with a ten-second timeout. It logs a warning
for each unhealthy address. It does not remove unhealthy addresses from load
balancing.

## Embedding

`Gateway` is a WSGI application, so any WSGI server can mount it and tests
can drive it directly:

```python
from svcgateway.gateway import Gateway

gateway = Gateway(":8080", "./services")
gateway.start()   # starts the heartbeat and serves until stop() is called
```

`Gateway.from_env()` builds the gateway from `GATEWAY_ADDRESS` and
`REGISTRY_DIRECTORY`. `gateway.stop()` stops the heartbeat and the server.

## Limitations

- Only REST services can be called. A `GRPC` service can be registered and
  listed, but a call with any `type` other than `rest` is refused.
- Logs go only to standard error. There is no remote log sink.
- Metrics are kept in memory per process and reset on restart.