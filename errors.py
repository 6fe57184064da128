class HuffmanError(Exception): # base class for every codec failure
    pass


class EmptyInputError(HuffmanError): # nothing encodable in the input
    pass


class CodeLookupError(HuffmanError, LookupError): # retained symbol has no code
    pass


class MalformedTreeError(HuffmanError): # tree description breaks the grammar
    pass


class TraversalError(HuffmanError): # decode walk fell off the tree
    pass


class MalformedPayloadError(HuffmanError): # framed payload header is invalid
    pass


class PayloadTooLargeError(HuffmanError): # bit count does not fit the framed header
    pass
