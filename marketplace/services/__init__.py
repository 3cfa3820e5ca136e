from .bid_service import BidService, BidResult, BidRejection, BidConflict

__all__ = ['BidService', 'BidResult', 'BidRejection', 'BidConflict']
