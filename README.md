# asdbatch

`asdbatch` is a batch job that fills in the age of members whose age has not
yet been checked. For each telecom carrier it asks the member database,
through its DMRS HTTP interface, for a page of unchecked members, looks each
phone number up in the carrier's TCRS service, turns the answer into an age in
whole years and writes that age back. It repeats until the database returns
no more members for the carrier.

Three carriers are handled, each by its own batch running in its own thread:

| Carrier | Telecom code | What TCRS returns                       | How the age is worked out          |
|---------|--------------|-----------------------------------------|------------------------------------|
| SKT     | 0            | `Body.Body.SSN_BIRTH_DT` as `YYYYMMDD`  | whole years up to today (UTC date) |
| KT      | 1            | `Body.USER_SSN_FRONT` as `YYMMDD`       | `00`–`25` are 2000s, others 1900s  |
| LGUP    | 2            | `Body.AGE_OUT`, a number as text        | taken as is                        |

When an answer cannot be read, or the lookup fails, the age stored is `-1`.

## Installing

```
pip install .
```

The package has no dependencies outside the standard library.

## Running

```
asdbatch
```

The command reads `config.json` from a configuration directory, sets up
logging and runs the carrier batches that the configuration switches on. It
exits with status 1 if a field of `config.json` has the wrong type.

The environment variable `CONFIG_SET` decides which options are accepted:

* If `$CONFIG_SET` is `LIVE`: `--config_home` (default `$CONFIG_HOME`) is the
  configuration directory and `--config_url` (default `$CONFIG_URL`) the
  address `config.json` is downloaded from.
* Otherwise: `--app-env` (default `$CONFIG_HOME`, then `./`) is the
  configuration directory.

`--config_set` (default `$CONFIG_SET`) is accepted in both cases. Each option
may also be written with a single dash (`-config_home`). The directory is
joined to `config.json` as plain text, so give it with a trailing `/`.

When the configuration set is `LIVE`, the job tries to create the
configuration directory (one level only) and downloads `config.json` into it
before reading it; failures there are logged and the job goes on with whatever
file is present. A missing or unreadable `config.json` leaves every setting at
its default.

## Configuration

```json
{
  "BENZ":    {"MIDDLECONF": {"DMRSURL": "http://localhost:8080/dmrs"},
              "TcrsURL": "http://localhost:8081/tcrs/"},
  "BENTLEY": {"MIDDLECONF": {}, "TcrsURL": ""},
  "SATURN":  {"MIDDLECONF": {}, "TcrsURL": ""},
  "FERRARI": {"MIDDLECONF": {}, "TcrsURL": ""},
  "TESLA":   {"MIDDLECONF": {}, "TcrsURL": ""},
  "BenzProcess": true,
  "BentleyProcess": false,
  "SaturnProcess": false,
  "FerrariProcess": false,
  "TeslaProcess": false,
  "SKTProcess": true,
  "KTProcess": true,
  "LGUPProcess": true,
  "DelaySecSKT": 100,
  "DelaySecKT": 100,
  "DelaySecLGUP": 100,
  "MaxMemberList": 500,
  "LogerfilePath": "./logs/asd"
}
```

* The first of `BenzProcess`, `BentleyProcess`, `SaturnProcess`,
  `FerrariProcess`, `TeslaProcess` that is `true` picks the service whose
  settings are used: `MIDDLECONF.DMRSURL` is the member database address and
  `TcrsURL` the TCRS address, to which the carrier name (`SKT`, `KT`, `LGUP`)
  is appended.
* `SKTProcess`, `KTProcess` and `LGUPProcess` switch the carrier batches on.
* `DelaySec…` is the pause before each TCRS lookup, in milliseconds.
* `MaxMemberList` is how many members are asked for per round.
* `LogerfilePath` is the prefix of the log file: the job logs at debug level
  to `<LogerfilePath>_.log` (its parent directories are created) and to
  standard output. The name passes through `strftime`, so `%` codes in it are
  replaced by the current date and time.

Field names are matched case-insensitively when the exact name is absent.

If no service is switched on, the job logs that and waits forever without
doing anything, so that the container it runs in stays up.

## Wire formats

Both services are called with an HTTP `POST` of a JSON document, with a
5-second timeout.

* TCRS: `{"Header": {"CmdType": "USERINFO"}, "Body": {"PNumber": "..."}}`,
  with `CmdType` `USERINFOANDKWAYS` for KT. The reply is split into `Header`
  and `Body`.
* DMRS: `{"Header": {"TransactionID", "CallApp": "ASD", "XMLName": "ASD",
  "CmdType", "Query"}, "Data": [...]}`. Members are selected with query
  `SelectAsdMember` (command `DBMW_00010`, data `[telecom, max]`) and ages
  stored with `UpdateAgeCheck` (command `DBMW_00030`, data `[age, pnumber]`).
  The reply's `Body` for a selection is a list of member records
  (`PNumber`, `Telecom`, `PCCode`, `Age`, `RegDT`, `Complete`).

A failed member selection ends that carrier's batch; a failed age update is
logged and the batch goes on.

## Using it from Python

```python
from datetime import date

from asdbatch.ages import kt_age, skt_age

skt_age("20000101", date(2024, 6, 1))   # 24
kt_age("991231", date(2024, 6, 1))      # 24
```

* `asdbatch.ages` — `Telecom`, `skt_age`, `kt_age`, `age_on` and
  `extract_age`, which returns `-1` for a reply it cannot read.
* `asdbatch.formats` — `AsdMember` and `LGUPUserInfo`, with `from_dict` and
  `to_dict`.
* `asdbatch.tcrs` — `get_member_info`, `build_request`, `parse_response`,
  `telecom_name` and `send_json` (raises `TcrsError`).
* `asdbatch.dmrs` — `select_asd_members`, `update_age`, `dmrs_call` and
  `make_header` (raise `DmrsError`).
* `asdbatch.config` — `Config`, `ServiceConfig` and `Factory`, which loads
  the configuration, sets up logging and, used as a context manager, closes
  its log handlers on exit.
* `asdbatch.batch` — `TelecomBatch`, which runs one carrier against any
  `MemberStore`; `DmrsMemberStore` is the one backed by DMRS.
* `asdbatch.process` — `ASDProcess`, whose `processing()` runs the enabled
  batches and returns how many members each carrier handled.
* `asdbatch.cli` — `parse_args` and `main`, behind the `asdbatch` command.

The TCRS and DMRS functions take a `sender` callable, and `TelecomBatch` and
`ASDProcess` take a store and a lookup, so a different transport can be put
in their place.

## What it does not do

Every service, Tesla included, is reached through the DMRS HTTP interface
described above; there is no other transport to the member database. The log
file is a single file and is not rotated.

## Tests

```
pip install .[test]
pytest
```