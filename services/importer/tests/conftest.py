from __future__ import annotations

from collections.abc import Callable

import pytest

DOCUMENT_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<questestinterop xmlns="http://www.imsglobal.org/xsd/ims_qtiasiv1p2">
  <assessment ident="bank1" title="Week 1">
    <section ident="root_section">
{items}
    </section>
  </assessment>
</questestinterop>
"""

ITEM_TEMPLATE = """<item ident="{ident}" title="{title}">
  <itemmetadata>
    <qtimetadata>
      <qtimetadatafield>
        <fieldlabel>question_type</fieldlabel>
        <fieldentry>{qtype}</fieldentry>
      </qtimetadatafield>
      <qtimetadatafield>
        <fieldlabel>points_possible</fieldlabel>
        <fieldentry>1.0</fieldentry>
      </qtimetadatafield>
    </qtimetadata>
  </itemmetadata>
  {body}
</item>"""


def canvas_item(ident: str, qtype: str, body: str, title: str = "") -> str:
    return ITEM_TEMPLATE.format(ident=ident, qtype=qtype, body=body, title=title)


def canvas_document(*items: str) -> str:
    return DOCUMENT_TEMPLATE.format(items="\n".join(items))


@pytest.fixture
def make_item() -> Callable[..., str]:
    return canvas_item


@pytest.fixture
def make_document() -> Callable[..., str]:
    return canvas_document


TRUE_FALSE_BODY = """<presentation>
    <material><mattext texttype="text/html">&lt;p&gt;The sky is blue.&lt;/p&gt;</mattext></material>
    <response_lid ident="response1" rcardinality="Single">
      <render_choice>
        <response_label ident="8001"><material><mattext texttype="text/plain">True</mattext></material></response_label>
        <response_label ident="8002"><material><mattext texttype="text/plain">False</mattext></material></response_label>
      </render_choice>
    </response_lid>
  </presentation>
  <resprocessing>
    <outcomes><decvar maxvalue="100" minvalue="0" varname="SCORE" vartype="Decimal"/></outcomes>
    <respcondition continue="Yes">
      <conditionvar><other/></conditionvar>
      <displayfeedback feedbacktype="Response" linkrefid="general_fb"/>
    </respcondition>
    <respcondition continue="No">
      <conditionvar><varequal respident="response1">8001</varequal></conditionvar>
      <setvar action="Set" varname="SCORE">100</setvar>
    </respcondition>
  </resprocessing>
  <itemfeedback ident="general_fb">
    <flow_mat><material><mattext texttype="text/html">Look up.</mattext></material></flow_mat>
  </itemfeedback>"""

SHORT_ANSWER_BODY = """<presentation>
    <material><mattext texttype="text/html">&lt;p&gt;Capital of France?&lt;/p&gt;</mattext></material>
    <response_str ident="response1" rcardinality="Single">
      <render_fib><response_label ident="answer1" rshuffle="No"/></render_fib>
    </response_str>
  </presentation>
  <resprocessing>
    <outcomes><decvar maxvalue="100" minvalue="0" varname="SCORE" vartype="Decimal"/></outcomes>
    <respcondition continue="No">
      <conditionvar>
        <varequal respident="response1">Paris</varequal>
        <varequal respident="response1">paris</varequal>
      </conditionvar>
      <setvar action="Set" varname="SCORE">100</setvar>
    </respcondition>
  </resprocessing>"""


@pytest.fixture
def true_false_body() -> str:
    return TRUE_FALSE_BODY


@pytest.fixture
def short_answer_body() -> str:
    return SHORT_ANSWER_BODY
