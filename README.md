# otpauth

otpauth is a small HTTP API for signing in with a phone number. A client asks for a
five-digit one-time password (OTP) for a phone number. The server stores the code in
MongoDB and prints it to standard output. The client then sends the code back and gets a
JSON Web Token signed with HS256. The first time a phone number signs in, a user record is
also created.

## Installation

```
pip install .
```

## Configuration

Settings come from environment variables. At startup, a `.env` file in the working
directory is loaded if one exists. Variables that are already set are not overridden.

| Variable                 | Meaning                                                                 |
|--------------------------|-------------------------------------------------------------------------|
| `MONGO_URI`              | MongoDB connection string. Required.                                    |
| `PORT`                   | Port to listen on, on all interfaces. Defaults to `8080`.               |
| `OTP_EXPIRATION_MINUTES` | How many minutes a code stays valid.                                    |
| `OTP_REQUEST_LIMIT`      | Number of codes one phone number may request within the last hour.     |
| `JWT_SECRET`             | Secret used to sign tokens.                                             |

If `OTP_EXPIRATION_MINUTES` or `OTP_REQUEST_LIMIT` is unset or is not an integer, it is
treated as `0`. With a limit of `0`, every code request is refused. With an expiration of
`0`, codes expire as soon as they are issued. Set both.

An example `.env`:

```
MONGO_URI=mongodb://localhost:27017
PORT=8080
OTP_EXPIRATION_MINUTES=2
OTP_REQUEST_LIMIT=5
JWT_SECRET=secret
```

Records are kept in the `otp_auth` database, in two collections: `otp_requests` and
`users`.

## Running

```
otpauth
```

The command does the following, in order:

1. Loads `.env`.
2. Connects to MongoDB. It waits up to ten seconds for a server and checks the connection
   with a ping.
3. Serves the API with Flask's built-in server.

It exits with status `1` in these cases:

- `MONGO_URI` is missing.
- MongoDB cannot be reached.
- The server cannot start, for example because `PORT` is not a number.

`otpauth --help` shows usage. The command takes no other options.

## Endpoints

### `POST /send-otp`

```json
{"phone": "<phone number>"}
```

- `200 {"message": "OTP has been sent"}`
- `400 {"error": "Phone number is required"}`: the body is missing, is not a JSON object,
  or has no non-empty string `phone`.
- `500 {"error": "Failed to send OTP"}`: a database error, or the hourly request limit
  has been reached.

### `POST /verify-otp`

```json
{"phone": "<phone number>", "otp": "12345"}
```

- `200 {"token": "<jwt>"}`. The token carries `phone`, `iat` and `exp` claims and is valid
  for 24 hours.
- `400 {"error": "Phone number and OTP code are required"}`
- `401 {"error": "..."}`, where the message is one of:
  - `OTP not found`
  - `OTP already used`
  - `OTP expired`
  - `invalid OTP`
  - `failed to create user`
  - `failed to generate token`

Only the most recent code issued to a phone number is checked. A code that has been
accepted once is marked as used and cannot be used again.

## Using it as a library

- `otpauth.main.build_app(client)` takes a connected `pymongo.MongoClient` and returns a
  Flask application with both routes.
- `otpauth.handler.create_app(auth_service)` builds the application around an
  `otpauth.service.AuthService(user_repo, otp_repo)` that you construct yourself.
- `otpauth.handler.setup_routes(app, client)` and `register_routes(app, auth_service)`
  add the routes to an existing Flask application.
- `otpauth.service.generate_otp()` returns a random five-digit code.
- `otpauth.service.generate_jwt(phone)` returns a signed token.
- `otpauth.config` provides `load_env()`, `get_env(key, fallback)` and
  `connect_mongodb()`.

## What it does not do

- Codes are not sent by SMS or any other channel. They are only printed to the server's
  standard output.
- No API documentation or Swagger page is served.
- No endpoint checks the issued tokens. Verifying them is left to the services that
  receive them.

## Development

```
pip install -e .[test]
pytest
```