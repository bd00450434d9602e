"""Fixed XML of a blank presentation package.

The documents below are the minimum set PowerPoint needs to open a file
with a single master, layout, notes master and theme. They carry no
per-package values: dimensions, metadata and backgrounds are applied to
the parsed trees afterwards.
"""

from pptx_export.package.relationships import (
    RT_NOTES_MASTER,
    RT_OFFICE_DOCUMENT,
    RT_SLIDE_LAYOUT,
    RT_SLIDE_MASTER,
    RT_THEME,
)

_DECL = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
_PML_NS = (
    'xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
    'xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships" '
    'xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main"'
)
_RELS_NS = 'xmlns="http://schemas.openxmlformats.org/package/2006/relationships"'
_OFFICE_RELS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
_PKG_RELS = "http://schemas.openxmlformats.org/package/2006/relationships"

_EMPTY_SP_TREE = (
    "<p:spTree>"
    '<p:nvGrpSpPr><p:cNvPr id="1" name=""/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>'
    "<p:grpSpPr><a:xfrm>"
    '<a:off x="0" y="0"/><a:ext cx="0" cy="0"/><a:chOff x="0" y="0"/><a:chExt cx="0" cy="0"/>'
    "</a:xfrm></p:grpSpPr>"
    "</p:spTree>"
)

_CLR_MAP = (
    '<p:clrMap bg1="lt1" tx1="dk1" bg2="lt2" tx2="dk2" accent1="accent1" accent2="accent2" '
    'accent3="accent3" accent4="accent4" accent5="accent5" accent6="accent6" '
    'hlink="hlink" folHlink="folHlink"/>'
)

_SCHEME_BG = '<p:bg><p:bgRef idx="1001"><a:schemeClr val="bg1"/></p:bgRef></p:bg>'


def _rels(*rows: tuple[str, str, str]) -> str:
    body = "".join(f'<Relationship Id="{r_id}" Type="{rel_type}" Target="{target}"/>'
                   for r_id, rel_type, target in rows)
    return f"{_DECL}<Relationships {_RELS_NS}>{body}</Relationships>"


# ---------------------------------------------------------------------------
# Package-level parts
# ---------------------------------------------------------------------------

CONTENT_TYPES_XML = (
    _DECL
    + '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="png" ContentType="image/png"/>'
    '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Override PartName="/docProps/app.xml" ContentType="application/vnd.openxmlformats-officedocument.extended-properties+xml"/>'
    '<Override PartName="/docProps/core.xml" ContentType="application/vnd.openxmlformats-package.core-properties+xml"/>'
    '<Override PartName="/ppt/theme/theme1.xml" ContentType="application/vnd.openxmlformats-officedocument.theme+xml"/>'
    '<Override PartName="/ppt/theme/theme2.xml" ContentType="application/vnd.openxmlformats-officedocument.theme+xml"/>'
    '<Override PartName="/ppt/slideMasters/slideMaster1.xml" ContentType="application/vnd.openxmlformats-officedocument.presentationml.slideMaster+xml"/>'
    '<Override PartName="/ppt/slideLayouts/slideLayout1.xml" ContentType="application/vnd.openxmlformats-officedocument.presentationml.slideLayout+xml"/>'
    '<Override PartName="/ppt/notesMasters/notesMaster1.xml" ContentType="application/vnd.openxmlformats-officedocument.presentationml.notesMaster+xml"/>'
    '<Override PartName="/ppt/presentation.xml" ContentType="application/vnd.openxmlformats-officedocument.presentationml.presentation.main+xml"/>'
    '<Override PartName="/ppt/tableStyles.xml" ContentType="application/vnd.openxmlformats-officedocument.presentationml.tableStyles+xml"/>'
    '<Override PartName="/ppt/presProps.xml" ContentType="application/vnd.openxmlformats-officedocument.presentationml.presProps+xml"/>'
    '<Override PartName="/ppt/viewProps.xml" ContentType="application/vnd.openxmlformats-officedocument.presentationml.viewProps+xml"/>'
    "</Types>"
)

ROOT_RELS_XML = _rels(
    ("rId1", RT_OFFICE_DOCUMENT, "ppt/presentation.xml"),
    ("rId2", f"{_PKG_RELS}/metadata/core-properties", "docProps/core.xml"),
    ("rId3", f"{_OFFICE_RELS}/extended-properties", "docProps/app.xml"),
)

APP_XML = (
    _DECL
    + '<Properties xmlns="http://schemas.openxmlformats.org/officeDocument/2006/extended-properties" '
    'xmlns:vt="http://schemas.openxmlformats.org/officeDocument/2006/docPropsVTypes">'
    "<Template/><TotalTime>0</TotalTime><Words>0</Words>"
    "<Application>Microsoft Office PowerPoint</Application>"
    "<PresentationFormat>On-screen Show</PresentationFormat>"
    "<Paragraphs>0</Paragraphs><Slides>0</Slides><Notes>0</Notes>"
    "<HiddenSlides>0</HiddenSlides><MMClips>0</MMClips><ScaleCrop>false</ScaleCrop>"
    "<HeadingPairs><vt:vector size=\"2\" baseType=\"variant\">"
    "<vt:variant><vt:lpstr>Theme</vt:lpstr></vt:variant><vt:variant><vt:i4>1</vt:i4></vt:variant>"
    "</vt:vector></HeadingPairs>"
    "<TitlesOfParts><vt:vector size=\"1\" baseType=\"lpstr\"><vt:lpstr>Office Theme</vt:lpstr></vt:vector></TitlesOfParts>"
    "<Company></Company><LinksUpToDate>false</LinksUpToDate><SharedDoc>false</SharedDoc>"
    "<HyperlinksChanged>false</HyperlinksChanged><AppVersion>12.0000</AppVersion>"
    "</Properties>"
)

CORE_XML = (
    _DECL
    + '<cp:coreProperties xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties" '
    'xmlns:dc="http://purl.org/dc/elements/1.1/" xmlns:dcterms="http://purl.org/dc/terms/" '
    'xmlns:dcmitype="http://purl.org/dc/dcmitype/" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">'
    "<dc:title></dc:title><dc:subject></dc:subject><dc:creator></dc:creator>"
    "<cp:keywords></cp:keywords><dc:description></dc:description>"
    "<cp:lastModifiedBy></cp:lastModifiedBy><cp:revision>0</cp:revision>"
    '<dcterms:created xsi:type="dcterms:W3CDTF"></dcterms:created>'
    '<dcterms:modified xsi:type="dcterms:W3CDTF"></dcterms:modified>'
    "</cp:coreProperties>"
)

PRESENTATION_XML = (
    _DECL
    + f'<p:presentation {_PML_NS} saveSubsetFonts="1">'
    '<p:sldMasterIdLst><p:sldMasterId id="2147483648" r:id="rId2"/></p:sldMasterIdLst>'
    '<p:notesMasterIdLst><p:notesMasterId r:id="rId3"/></p:notesMasterIdLst>'
    "<p:sldIdLst/>"
    '<p:sldSz cx="0" cy="0"/>'
    '<p:notesSz cx="0" cy="0"/>'
    "</p:presentation>"
)

PRESENTATION_RELS_XML = _rels(
    ("rId1", RT_THEME, "theme/theme1.xml"),
    ("rId2", RT_SLIDE_MASTER, "slideMasters/slideMaster1.xml"),
    ("rId3", RT_NOTES_MASTER, "notesMasters/notesMaster1.xml"),
    ("rId4", f"{_OFFICE_RELS}/viewProps", "viewProps.xml"),
    ("rId5", f"{_OFFICE_RELS}/presProps", "presProps.xml"),
    ("rId6", f"{_OFFICE_RELS}/tableStyles", "tableStyles.xml"),
)

PRES_PROPS_XML = f"{_DECL}<p:presentationPr {_PML_NS}/>"

TABLE_STYLES_XML = (
    _DECL
    + '<a:tblStyleLst xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
    'def="{5C22544A-7EE6-4342-B048-85BDC9FD1C3A}"/>'
)

VIEW_PROPS_XML = (
    _DECL
    + f"<p:viewPr {_PML_NS}>"
    '<p:normalViewPr><p:restoredLeft sz="15620"/><p:restoredTop sz="94660"/></p:normalViewPr>'
    '<p:slideViewPr><p:cSldViewPr showGuides="1"><p:cViewPr varScale="1">'
    '<p:scale><a:sx n="65" d="100"/><a:sy n="65" d="100"/></p:scale><p:origin x="-1452" y="-114"/>'
    "</p:cViewPr><p:guideLst/></p:cSldViewPr></p:slideViewPr>"
    '<p:notesTextViewPr><p:cViewPr><p:scale><a:sx n="100" d="100"/><a:sy n="100" d="100"/></p:scale>'
    '<p:origin x="0" y="0"/></p:cViewPr></p:notesTextViewPr>'
    '<p:gridSpacing cx="78028800" cy="78028800"/>'
    "</p:viewPr>"
)

# ---------------------------------------------------------------------------
# Masters, layout, themes
# ---------------------------------------------------------------------------

NOTES_MASTER_XML = (
    _DECL
    + f"<p:notesMaster {_PML_NS}>"
    f"<p:cSld>{_SCHEME_BG}{_EMPTY_SP_TREE}</p:cSld>"
    f"{_CLR_MAP}"
    "<p:notesStyle>"
    '<a:lvl1pPr marL="0" algn="l" defTabSz="914400" rtl="0" eaLnBrk="1" latinLnBrk="0" hangingPunct="1">'
    '<a:defRPr sz="1200" kern="1200"><a:solidFill><a:schemeClr val="tx1"/></a:solidFill>'
    '<a:latin typeface="+mn-lt"/><a:ea typeface="+mn-ea"/><a:cs typeface="+mn-cs"/></a:defRPr>'
    "</a:lvl1pPr>"
    "</p:notesStyle>"
    "</p:notesMaster>"
)

NOTES_MASTER_RELS_XML = _rels(("rId1", RT_THEME, "../theme/theme2.xml"))

SLIDE_LAYOUT_XML = (
    _DECL
    + f'<p:sldLayout {_PML_NS} preserve="1" userDrawn="1">'
    f'<p:cSld name="Blank">{_EMPTY_SP_TREE}</p:cSld>'
    "<p:clrMapOvr><a:masterClrMapping/></p:clrMapOvr>"
    "</p:sldLayout>"
)

SLIDE_LAYOUT_RELS_XML = _rels(("rId1", RT_SLIDE_MASTER, "../slideMasters/slideMaster1.xml"))

SLIDE_MASTER_XML = (
    _DECL
    + f"<p:sldMaster {_PML_NS}>"
    f"<p:cSld>{_SCHEME_BG}{_EMPTY_SP_TREE}</p:cSld>"
    f"{_CLR_MAP}"
    '<p:sldLayoutIdLst><p:sldLayoutId id="2147483649" r:id="rId1"/></p:sldLayoutIdLst>'
    "</p:sldMaster>"
)

SLIDE_MASTER_RELS_XML = _rels(
    ("rId1", RT_SLIDE_LAYOUT, "../slideLayouts/slideLayout1.xml"),
    ("rId2", RT_THEME, "../theme/theme1.xml"),
)

_FILL_STYLES = (
    "<a:fillStyleLst>"
    '<a:solidFill><a:schemeClr val="phClr"/></a:solidFill>'
    '<a:solidFill><a:schemeClr val="phClr"><a:tint val="50000"/></a:schemeClr></a:solidFill>'
    '<a:solidFill><a:schemeClr val="phClr"><a:shade val="80000"/></a:schemeClr></a:solidFill>'
    "</a:fillStyleLst>"
)

_LINE_STYLES = (
    "<a:lnStyleLst>"
    '<a:ln w="9525" cap="flat" cmpd="sng" algn="ctr"><a:solidFill><a:schemeClr val="phClr"/></a:solidFill><a:prstDash val="solid"/></a:ln>'
    '<a:ln w="25400" cap="flat" cmpd="sng" algn="ctr"><a:solidFill><a:schemeClr val="phClr"/></a:solidFill><a:prstDash val="solid"/></a:ln>'
    '<a:ln w="38100" cap="flat" cmpd="sng" algn="ctr"><a:solidFill><a:schemeClr val="phClr"/></a:solidFill><a:prstDash val="solid"/></a:ln>'
    "</a:lnStyleLst>"
)

_EFFECT_STYLES = (
    "<a:effectStyleLst>"
    "<a:effectStyle><a:effectLst/></a:effectStyle>"
    "<a:effectStyle><a:effectLst/></a:effectStyle>"
    "<a:effectStyle><a:effectLst/></a:effectStyle>"
    "</a:effectStyleLst>"
)

_BG_FILL_STYLES = (
    "<a:bgFillStyleLst>"
    '<a:solidFill><a:schemeClr val="phClr"/></a:solidFill>'
    '<a:solidFill><a:schemeClr val="phClr"><a:tint val="40000"/></a:schemeClr></a:solidFill>'
    '<a:solidFill><a:schemeClr val="phClr"><a:shade val="20000"/></a:schemeClr></a:solidFill>'
    "</a:bgFillStyleLst>"
)

THEME_XML = (
    _DECL
    + '<a:theme xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" name="Office Theme">'
    "<a:themeElements>"
    '<a:clrScheme name="Office">'
    '<a:dk1><a:sysClr val="windowText" lastClr="000000"/></a:dk1>'
    '<a:lt1><a:sysClr val="window" lastClr="FFFFFF"/></a:lt1>'
    '<a:dk2><a:srgbClr val="1F497D"/></a:dk2><a:lt2><a:srgbClr val="EEECE1"/></a:lt2>'
    '<a:accent1><a:srgbClr val="4F81BD"/></a:accent1><a:accent2><a:srgbClr val="C0504D"/></a:accent2>'
    '<a:accent3><a:srgbClr val="9BBB59"/></a:accent3><a:accent4><a:srgbClr val="8064A2"/></a:accent4>'
    '<a:accent5><a:srgbClr val="4BACC6"/></a:accent5><a:accent6><a:srgbClr val="F79646"/></a:accent6>'
    '<a:hlink><a:srgbClr val="0000FF"/></a:hlink><a:folHlink><a:srgbClr val="800080"/></a:folHlink>'
    "</a:clrScheme>"
    '<a:fontScheme name="Office">'
    '<a:majorFont><a:latin typeface="Calibri"/><a:ea typeface=""/><a:cs typeface=""/></a:majorFont>'
    '<a:minorFont><a:latin typeface="Calibri"/><a:ea typeface=""/><a:cs typeface=""/></a:minorFont>'
    "</a:fontScheme>"
    f'<a:fmtScheme name="Office">{_FILL_STYLES}{_LINE_STYLES}{_EFFECT_STYLES}{_BG_FILL_STYLES}</a:fmtScheme>'
    "</a:themeElements>"
    "<a:objectDefaults/><a:extraClrSchemeLst/>"
    "</a:theme>"
)

# Written once when a package is created, never modified afterwards.
STATIC_PARTS = {
    "_rels/.rels": ROOT_RELS_XML,
    "ppt/presProps.xml": PRES_PROPS_XML,
    "ppt/tableStyles.xml": TABLE_STYLES_XML,
    "ppt/viewProps.xml": VIEW_PROPS_XML,
    "ppt/notesMasters/notesMaster1.xml": NOTES_MASTER_XML,
    "ppt/notesMasters/_rels/notesMaster1.xml.rels": NOTES_MASTER_RELS_XML,
    "ppt/slideLayouts/slideLayout1.xml": SLIDE_LAYOUT_XML,
    "ppt/slideLayouts/_rels/slideLayout1.xml.rels": SLIDE_LAYOUT_RELS_XML,
    "ppt/slideMasters/_rels/slideMaster1.xml.rels": SLIDE_MASTER_RELS_XML,
    "ppt/theme/theme1.xml": THEME_XML,
    "ppt/theme/theme2.xml": THEME_XML,
}

# Parsed, edited during creation and pinned in memory.
EDITABLE_PARTS = {
    "[Content_Types].xml": CONTENT_TYPES_XML,
    "docProps/app.xml": APP_XML,
    "docProps/core.xml": CORE_XML,
    "ppt/presentation.xml": PRESENTATION_XML,
    "ppt/_rels/presentation.xml.rels": PRESENTATION_RELS_XML,
    "ppt/slideMasters/slideMaster1.xml": SLIDE_MASTER_XML,
}

# ---------------------------------------------------------------------------
# Per-slide documents
# ---------------------------------------------------------------------------

SLIDE_XML = (
    _DECL
    + f"<p:sld {_PML_NS}>"
    f"<p:cSld>{_EMPTY_SP_TREE}</p:cSld>"
    "<p:clrMapOvr><a:masterClrMapping/></p:clrMapOvr>"
    "</p:sld>"
)

SLIDE_LAYOUT_TARGET = "../slideLayouts/slideLayout1.xml"

NOTES_SLIDE_XML = (
    _DECL
    + f"<p:notes {_PML_NS}>"
    "<p:cSld><p:spTree>"
    '<p:nvGrpSpPr><p:cNvPr id="1" name=""/><p:cNvGrpSpPr/><p:nvPr/></p:nvGrpSpPr>'
    "<p:grpSpPr><a:xfrm>"
    '<a:off x="0" y="0"/><a:ext cx="0" cy="0"/><a:chOff x="0" y="0"/><a:chExt cx="0" cy="0"/>'
    "</a:xfrm></p:grpSpPr>"
    "<p:sp>"
    '<p:nvSpPr><p:cNvPr id="3" name="Notes Placeholder 2"/>'
    '<p:cNvSpPr><a:spLocks noGrp="1"/></p:cNvSpPr>'
    '<p:nvPr><p:ph type="body" idx="1"/></p:nvPr></p:nvSpPr>'
    "<p:spPr/>"
    "</p:sp>"
    "</p:spTree></p:cSld>"
    "<p:clrMapOvr><a:masterClrMapping/></p:clrMapOvr>"
    "</p:notes>"
)
