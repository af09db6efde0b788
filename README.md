# jiafile

jiafile is a small HTTP server for managing files. It lists directories,
creates files and directories, moves, copies and deletes entries, and reports
file details. Every handled request gets HTTP status 200 and a JSON body of
the same shape:

```json
{"code": 0, "message": "success", "data": ...}
```

A `code` of `0` means success. Any other value is an error:

| code | meaning |
|------|---------|
| 1001 | parameter missing or invalid, or a bad request body |
| 1002 | method not allowed |
| 1004 | operation failed; `message` holds the error text |

The code `1003` (path does not exist) is defined in `jiafile.types.Code` but
the handlers report failures as `1004`.

## Installation

```
pip install .
```

## Running

```
jiafile
```

The command takes no options besides `--help`. It listens on all interfaces,
on port `8190` unless configured otherwise, and writes its log to
`<LOG_DIR>/app-YYYY-MM-DD.log` (by default under `logs/`). Each request is
logged with its method, URI, client address and duration.

## Configuration

At startup the server reads a `.env` file in the working directory. If there
is no such file, the defaults below are used as they are. If the file exists,
its variables are added to the environment (without replacing variables that
are already set), and then these variables are read from the environment:

| variable    | default   | effect |
|-------------|-----------|--------|
| `PORT`      | `8190`    | port the server listens on |
| `LOG_LEVEL` | `info`    | stored in the configuration; all messages are logged regardless |
| `LOG_DIR`   | `logs`    | directory for log files, created if missing |
| `ROOT_PATH` | *(empty)* | if set, absolute paths outside this directory are rejected, and relative paths are resolved under it |

## Endpoints

Query parameters `path`, `src` and `dst` must be absolute paths; a value that
is relative or contains `..` or `./` is rejected with code `1001`.

| route       | method | parameters | action |
|-------------|--------|------------|--------|
| `/`         | any    | none       | a plain-text welcome message |
| `/list`     | any    | `path`     | list the directory's entries, sorted by name |
| `/info`     | any    | `path`     | details of one file or directory (symbolic links followed) |
| `/mkdir`    | POST   | `path`     | create a directory, with any missing parents |
| `/touch`    | POST   | `path`     | create an empty file; fails if the path exists |
| `/delete`   | DELETE | `path`     | remove a file or a whole directory tree |
| `/move`     | POST   | `src`, `dst` | rename or move an entry, replacing a file at `dst` |
| `/copy`     | POST   | `src`, `dst` | copy one file's content to `dst` |
| `/document` | POST   | JSON body `{"path", "type", "content"}` | create an empty file; if the path has no extension, `.<type>` is added |

Entries in `/list` and `/info` carry `name`, `isDir`, `size`, `sizeHuman`
(such as `1.5 KB`), `path`, `ext`, `mimeType`, `createTime`, `modTime`,
`accessTime`, `mode` (such as `-rw-r--r--`), `isHidden`, `isSymlink` and
`symlinkTarget`.

Every response carries permissive CORS headers, and `OPTIONS` requests get
an empty `200` reply. Unknown routes get a plain `404`; an unexpected error
inside the application gets a plain `500`.

Example:

```
curl 'http://localhost:8190/list?path=/tmp'
curl -X POST 'http://localhost:8190/mkdir?path=/tmp/new-folder'
curl -X DELETE 'http://localhost:8190/delete?path=/tmp/new-folder'
```

## Using it as a library

- `jiafile.fileservice.FileService` performs the file operations directly
  (`list`, `create_dir`, `create_file`, `delete`, `move`, `copy`, `get_info`,
  `create_document`) and raises `FileServiceError`, `PathError` or `OSError`
  on failure. `format_file_size` and `detect_mime_type` are available too.
- `jiafile.handler.Handler` wraps a `FileService` and turns werkzeug requests
  into JSON replies.
- `jiafile.server.create_app(handler)` builds the WSGI application, with the
  middleware from `jiafile.middleware`, which any WSGI server can serve.
- `jiafile.config` provides `load_config`, `load_env`, `load_ignore_config`
  and the `get_env*` helpers; `jiafile.paths.PathProcessor` resolves paths
  against a root; `jiafile.errors.AppError` is an error with an HTTP status.

## What it does not do

- There is no authentication: anyone who can reach the port can change files
  the server process can write.
- File content cannot be uploaded. `/touch` and `/document` always create
  empty files; the `content` of a document request is ignored.
- `/copy` copies single files only, not directories.
- The ignore list read by `load_ignore_config` is not applied to listings.