from __future__ import annotations



class IntervalError(Exception):
    '''Base class of all errors raised by 'chronorange'.'''



class InvalidIntervalError(IntervalError, ValueError):
    '''The boundaries do not describe a valid interval.

    Raised when the start lies after the end, when both boundaries
    are open and simultaneous, or when the boundaries do not belong
    to the same timeline.'''



class CanonicalizationError(IntervalError):
    '''The interval cannot be normalized because a boundary would
    have to be stepped beyond the representable timeline.'''



class UnsupportedForInfiniteError(IntervalError):
    '''The operation needs a finite interval.'''



class EmptyIntervalError(IntervalError):
    '''The operation needs at least one time point.'''



class InternalConsistencyError(IntervalError, AssertionError):
    '''No interval relation matched. This is a defect, never an input
    error.'''



class ArithmeticOverflowError(IntervalError, OverflowError):
    '''A count or a time point exceeds the representable range.'''
