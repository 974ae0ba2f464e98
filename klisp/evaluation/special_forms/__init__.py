"""Registry of special forms for the klisp evaluator.

Maps Symbols to handler functions that implement non-standard evaluation rules.
The evaluator consults this table to dispatch special forms before ordinary
function application. Handlers take `(tail, env, evaluate_fn)` where `tail`
is the unevaluated argument forms.
"""

from klisp.types.symbol import Symbol
from klisp.evaluation.special_forms.quote_form import quote_form
from klisp.evaluation.special_forms.lambda_form import lambda_form
from klisp.evaluation.special_forms.define_form import define_form
from klisp.evaluation.special_forms.if_form import if_form

SPECIAL_FORMS = {
    Symbol("quote"): quote_form,
    Symbol("lambda"): lambda_form,
    Symbol("define"): define_form,
    Symbol("if"): if_form,
}
