from __future__ import annotations

from enum import IntEnum, unique


@unique
class Code(IntEnum):
    """
    Canonical status codes for failures returned to callers.

    Values mirror the gRPC status codes one to one, so a transport layer can
    translate them by numeric identity. The integers are part of the public
    contract: they may be persisted or sent to other processes, and must
    never be renumbered or reused for a different meaning.

    Deciding between FAILED_PRECONDITION, ABORTED and UNAVAILABLE:
        (a) Use UNAVAILABLE if the client can retry just the failing call.
        (b) Use ABORTED if the client should retry at a higher level
            (e.g. restarting a read-modify-write sequence).
        (c) Use FAILED_PRECONDITION if the client should not retry until
            the system state has been explicitly fixed. E.g. if an "rmdir"
            fails because the directory is non-empty, FAILED_PRECONDITION
            should be returned since the client should not retry unless
            the files are deleted from the directory first.
        (d) Use FAILED_PRECONDITION if the client performs a conditional
            get/update/delete on a resource and the resource does not match
            the condition (e.g. conflicting read-modify-write).

    The set is closed. Reuse an existing value rather than inventing a new
    one; a new member would change the vocabulary every caller relies on.
    """

    # Returned on success. Never attach it to a failure.
    OK = 0

    # The operation was cancelled, typically by the caller.
    CANCELED = 1

    # Unknown error. Used when a status received from another address space
    # belongs to an error space unknown here, and for errors raised by APIs
    # that do not return enough information to classify them.
    UNKNOWN = 2

    # The client specified an invalid argument. Unlike FAILED_PRECONDITION,
    # the argument is problematic regardless of the state of the system
    # (e.g. a malformed file name).
    INVALID_ARGUMENT = 3

    # The operation expired before completion. For operations that change
    # the state of the system this may be returned even if the operation
    # completed successfully, e.g. when a successful reply was delayed past
    # the deadline.
    DEADLINE_EXCEEDED = 4

    # Some requested entity (e.g. file or directory) was not found.
    NOT_FOUND = 5

    # An attempt to create an entity failed because one already exists.
    ALREADY_EXISTS = 6

    # The caller is identified but may not execute the operation. Not for
    # rejections caused by an exhausted resource (RESOURCE_EXHAUSTED) or by
    # an unidentified caller (UNAUTHENTICATED).
    PERMISSION_DENIED = 7

    # Some resource has been exhausted, perhaps a per-user quota, or perhaps
    # the entire file system is out of space.
    RESOURCE_EXHAUSTED = 8

    # The system is not in a state required for the operation's execution.
    # E.g. the directory to be deleted is non-empty, or an rmdir is applied
    # to a non-directory. See the class docstring for FAILED_PRECONDITION
    # vs ABORTED vs UNAVAILABLE.
    FAILED_PRECONDITION = 9

    # The operation was aborted, typically due to a concurrency issue such
    # as a sequencer check failure or a transaction abort.
    ABORTED = 10

    # The operation was attempted past the valid range, e.g. seeking or
    # reading past end of file.
    #
    # Unlike INVALID_ARGUMENT this may be fixed if the system state changes:
    # a 32-bit file system returns INVALID_ARGUMENT for an offset outside
    # [0, 2**32 - 1] but OUT_OF_RANGE for an offset past the current file
    # size. Prefer OUT_OF_RANGE over FAILED_PRECONDITION when it applies, so
    # callers iterating through a space can detect when they are done.
    OUT_OF_RANGE = 11

    # The operation is not implemented, or not supported/enabled here.
    UNIMPLEMENTED = 12

    # Some invariant expected by the underlying system has been broken.
    # If you see one of these, something is very broken.
    INTERNAL = 13

    # The service is currently unavailable. Most likely a transient
    # condition that retrying with a backoff will correct.
    UNAVAILABLE = 14

    # Unrecoverable data loss or corruption.
    DATA_LOSS = 15

    # The request does not have valid authentication credentials.
    UNAUTHENTICATED = 16
