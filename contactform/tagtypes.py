"""
# Contact-Form: tagtypes.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Standard tag types: their renderers and SWV schema contributors.
"""

from typing import TYPE_CHECKING

from contactform.registry import TagTypeRegistry
from contactform.swv import Schema, create_rule
from contactform.tags import FormTag
from contactform.utilities import escape_html, format_attributes

if TYPE_CHECKING:
    from contactform.contact_form import ContactForm

DEFAULT_ACCEPTABLE_FILETYPES = 'audio/*|video/*|image/*'
DEFAULT_SUBMIT_VALUE = 'Submit'
BLANK_ITEM_LABEL = '---'
TEXT_BASETYPES = ('text', 'email', 'url', 'tel')
SELECTABLE_BASETYPES = ('select', 'checkbox', 'radio')


def form_controls_class(type_: str, default_classes: str = '') -> str:
    basetype = type_.strip().rstrip('*')
    classes = ['wpcf7-form-control'] + [class_ for class_ in default_classes.split(' ') if class_]
    classes.append(f'wpcf7-{basetype}')
    if type_.strip().endswith('*'):
        classes.append('wpcf7-validates-as-required')

    return ' '.join(classes)


def wrap_control(tag: FormTag, control: str) -> str:
    return f'<span class="wpcf7-form-control-wrap" data-name="{escape_html(tag.name)}">{control}</span>'


def required_attributes(tag: FormTag) -> dict:
    attributes = {'aria-invalid': 'false'}
    if tag.is_required():
        attributes['aria-required'] = 'true'

    return attributes


def placeholder_and_value(tag: FormTag, value: str) -> tuple[str, str]:
    """
    Split the first value into a placeholder and a value per the `placeholder` option.
    """
    if tag.has_option('placeholder') or tag.has_option('watermark'):
        return value, ''

    return '', value


def acceptable_filetypes(tag: FormTag) -> list[str]:
    """
    Get acceptable file types from the `filetypes:` option (`|`-separated),
    as extensions (`.pdf`) or MIME types (`image/*`).
    """
    filetypes_options = tag.get_option('filetypes', '[-0-9a-zA-Z.,%_|/*]+')
    filetypes = '|'.join(filetypes_options) or DEFAULT_ACCEPTABLE_FILETYPES

    acceptable = []
    for filetype in filetypes.split('|'):
        filetype = filetype.strip().lower()
        if filetype == '':
            continue
        if '/' not in filetype and not filetype.startswith('.'):
            filetype = f'.{filetype}'
        acceptable.append(filetype)

    return list(dict.fromkeys(acceptable))


def render_text(tag: FormTag) -> str:
    if tag.name == '':
        return ''

    class_ = form_controls_class(tag.type_)
    if tag.basetype in ('email', 'url', 'tel'):
        class_ += f' wpcf7-validates-as-{tag.basetype}'

    value = tag.values[0] if len(tag.values) > 0 else ''
    placeholder, value = placeholder_and_value(tag, value)

    attributes = {
        'size': tag.get_size_option('40'),
        'maxlength': tag.get_maxlength_option(),
        'minlength': tag.get_minlength_option(),
        'class': tag.get_class_option(class_),
        'id': tag.get_id_option(),
        'tabindex': tag.get_option('tabindex', 'signed_int', single=True),
        'readonly': tag.has_option('readonly'),
        'autocomplete': tag.get_option('autocomplete', '[-0-9a-zA-Z]+', single=True),
        **required_attributes(tag),
        'placeholder': placeholder or None,
        'value': tag.get_default_option(value),
        'type': tag.basetype,
        'name': tag.name,
    }

    return wrap_control(tag, f'<input {format_attributes(attributes)} />')


def render_textarea(tag: FormTag) -> str:
    if tag.name == '':
        return ''

    value = tag.content if tag.content != '' else (tag.values[0] if len(tag.values) > 0 else '')
    placeholder, value = placeholder_and_value(tag, value)

    attributes = {
        'cols': tag.get_cols_option('40'),
        'rows': tag.get_rows_option('10'),
        'maxlength': tag.get_maxlength_option(),
        'minlength': tag.get_minlength_option(),
        'class': tag.get_class_option(form_controls_class(tag.type_)),
        'id': tag.get_id_option(),
        'tabindex': tag.get_option('tabindex', 'signed_int', single=True),
        'readonly': tag.has_option('readonly'),
        'autocomplete': tag.get_option('autocomplete', '[-0-9a-zA-Z]+', single=True),
        **required_attributes(tag),
        'placeholder': placeholder or None,
        'name': tag.name,
    }

    return wrap_control(tag, f'<textarea {format_attributes(attributes)}>{escape_html(value)}</textarea>')


def render_number(tag: FormTag) -> str:
    if tag.name == '':
        return ''

    value = tag.values[0] if len(tag.values) > 0 else ''
    placeholder, value = placeholder_and_value(tag, value)

    attributes = {
        'class': tag.get_class_option(form_controls_class(tag.type_, 'wpcf7-validates-as-number')),
        'id': tag.get_id_option(),
        'tabindex': tag.get_option('tabindex', 'signed_int', single=True),
        'min': tag.get_option('min', 'num', single=True) or None,
        'max': tag.get_option('max', 'num', single=True) or None,
        'step': tag.get_option('step', 'num', single=True) or None,
        'readonly': tag.has_option('readonly'),
        **required_attributes(tag),
        'placeholder': placeholder or None,
        'value': tag.get_default_option(value),
        'type': tag.basetype,
        'name': tag.name,
    }

    return wrap_control(tag, f'<input {format_attributes(attributes)} />')


def render_date(tag: FormTag) -> str:
    if tag.name == '':
        return ''

    value = tag.values[0] if len(tag.values) > 0 else ''
    placeholder, value = placeholder_and_value(tag, value)

    attributes = {
        'class': tag.get_class_option(form_controls_class(tag.type_, 'wpcf7-validates-as-date')),
        'id': tag.get_id_option(),
        'tabindex': tag.get_option('tabindex', 'signed_int', single=True),
        'min': tag.get_date_option('min'),
        'max': tag.get_date_option('max'),
        'step': tag.get_option('step', 'int', single=True),
        'readonly': tag.has_option('readonly'),
        **required_attributes(tag),
        'placeholder': placeholder or None,
        'value': tag.get_default_option(value),
        'type': tag.basetype,
        'name': tag.name,
    }

    return wrap_control(tag, f'<input {format_attributes(attributes)} />')


def render_select(tag: FormTag) -> str:
    if tag.name == '':
        return ''

    multiple = tag.has_option('multiple')
    values = list(tag.values)
    labels = list(tag.labels)

    if tag.has_option('first_as_label') and len(values) > 0:
        values[0] = ''
    elif tag.has_option('include_blank') or len(values) == 0:
        values.insert(0, '')
        labels.insert(0, BLANK_ITEM_LABEL)

    selected_values = tag.get_default_option(multiple=True)
    options = []
    for value, label in zip(values, labels):
        option_attributes = {
            'value': value,
            'selected': value != '' and value in selected_values,
        }
        options.append(f'<option {format_attributes(option_attributes)}>{escape_html(label)}</option>')

    attributes = {
        'class': tag.get_class_option(form_controls_class(tag.type_)),
        'id': tag.get_id_option(),
        'tabindex': tag.get_option('tabindex', 'signed_int', single=True),
        **required_attributes(tag),
        'multiple': multiple,
        'name': tag.name + ('[]' if multiple else ''),
    }

    return wrap_control(tag, f'<select {format_attributes(attributes)}>{"".join(options)}</select>')


def render_checkbox(tag: FormTag) -> str:
    """
    Render a checkbox or radio group, one list item per value.
    """
    if tag.name == '':
        return ''

    input_type = 'radio' if tag.basetype == 'radio' else 'checkbox'
    multiple = input_type == 'checkbox' and not tag.has_option('exclusive')
    label_first = tag.has_option('label_first')
    use_label_element = tag.has_option('use_label_element')
    selected_values = tag.get_default_option(multiple=True)

    items = []
    for value, label in zip(tag.values, tag.labels):
        input_attributes = {
            'type': input_type,
            'name': tag.name + ('[]' if multiple and len(tag.values) > 1 else ''),
            'value': value,
            'checked': value in selected_values,
        }
        control = f'<input {format_attributes(input_attributes)} />'
        label_html = f'<span class="wpcf7-list-item-label">{escape_html(label)}</span>'

        if label_first:
            item = f'{label_html}{control}'
        else:
            item = f'{control}{label_html}'

        if use_label_element:
            item = f'<label>{item}</label>'

        items.append(f'<span class="wpcf7-list-item">{item}</span>')

    attributes = {
        'class': tag.get_class_option(form_controls_class(tag.type_)),
        'id': tag.get_id_option(),
    }

    return wrap_control(tag, f'<span {format_attributes(attributes)}>{"".join(items)}</span>')


def render_acceptance(tag: FormTag) -> str:
    if tag.name == '':
        return ''

    class_ = form_controls_class(tag.type_)
    if tag.has_option('optional'):
        class_ += ' optional'

    input_attributes = {
        'type': 'checkbox',
        'name': tag.name,
        'value': '1',
        'aria-invalid': 'false',
        'checked': tag.has_option('default:on'),
    }
    item = f'<input {format_attributes(input_attributes)} />'
    if tag.content != '':
        item += f'<span class="wpcf7-list-item-label">{tag.content}</span>'

    attributes = {
        'class': tag.get_class_option(class_),
        'id': tag.get_id_option(),
    }

    return wrap_control(
        tag,
        f'<span {format_attributes(attributes)}><span class="wpcf7-list-item"><label>{item}</label></span></span>',
    )


def render_file(tag: FormTag) -> str:
    if tag.name == '':
        return ''

    attributes = {
        'size': tag.get_size_option('40'),
        'class': tag.get_class_option(form_controls_class(tag.type_)),
        'id': tag.get_id_option(),
        'tabindex': tag.get_option('tabindex', 'signed_int', single=True),
        'accept': ','.join(acceptable_filetypes(tag)),
        **required_attributes(tag),
        'type': 'file',
        'name': tag.name,
    }

    return wrap_control(tag, f'<input {format_attributes(attributes)} />')


def render_hidden(tag: FormTag) -> str:
    if tag.name == '':
        return ''

    value = tag.values[0] if len(tag.values) > 0 else ''
    attributes = {
        'type': 'hidden',
        'name': tag.name,
        'value': tag.get_default_option(value),
        'id': tag.get_id_option(),
    }

    return f'<input {format_attributes(attributes)} />'


def render_submit(tag: FormTag) -> str:
    value = tag.values[0] if len(tag.values) > 0 else DEFAULT_SUBMIT_VALUE
    attributes = {
        'class': tag.get_class_option(form_controls_class(tag.type_, 'has-spinner')),
        'id': tag.get_id_option(),
        'tabindex': tag.get_option('tabindex', 'signed_int', single=True),
        'value': value,
        'type': 'submit',
    }

    return f'<input {format_attributes(attributes)} />'


def render_response(tag: FormTag) -> str:
    return '<div class="wpcf7-response-output" aria-hidden="true"></div>'


def render_reflection(tag: FormTag) -> str:
    if tag.name == '':
        return ''

    attributes = {
        'data-reflection-of': tag.name,
        'class': tag.get_class_option(form_controls_class(tag.type_)),
        'id': tag.get_id_option(),
    }

    return f'<fieldset {format_attributes(attributes)}></fieldset>'


def add_required_rule(schema: Schema, tag: FormTag, contact_form: 'ContactForm'):
    if tag.is_required():
        schema.add_rule(create_rule('required', field=tag.name, error=contact_form.message('invalid_required')))


def add_length_rules(schema: Schema, tag: FormTag, contact_form: 'ContactForm'):
    minlength = tag.get_minlength_option()
    if minlength:
        schema.add_rule(create_rule(
            'minlength',
            field=tag.name,
            threshold=int(minlength),
            error=contact_form.message('invalid_too_short'),
        ))

    maxlength = tag.get_maxlength_option()
    if maxlength:
        schema.add_rule(create_rule(
            'maxlength',
            field=tag.name,
            threshold=int(maxlength),
            error=contact_form.message('invalid_too_long'),
        ))


def contribute_text_rules(schema: Schema, contact_form: 'ContactForm'):
    for tag in contact_form.scan_form_tags(basetype=TEXT_BASETYPES):
        add_required_rule(schema, tag, contact_form)

        if tag.basetype == 'email':
            schema.add_rule(create_rule('email', field=tag.name, error=contact_form.message('invalid_email')))
        elif tag.basetype == 'url':
            schema.add_rule(create_rule('url', field=tag.name, error=contact_form.message('invalid_url')))
        elif tag.basetype == 'tel':
            schema.add_rule(create_rule('tel', field=tag.name, error=contact_form.message('invalid_tel')))

        add_length_rules(schema, tag, contact_form)


def contribute_textarea_rules(schema: Schema, contact_form: 'ContactForm'):
    for tag in contact_form.scan_form_tags(basetype='textarea'):
        add_required_rule(schema, tag, contact_form)
        add_length_rules(schema, tag, contact_form)


def contribute_number_rules(schema: Schema, contact_form: 'ContactForm'):
    for tag in contact_form.scan_form_tags(basetype=['number', 'range']):
        add_required_rule(schema, tag, contact_form)
        schema.add_rule(create_rule('number', field=tag.name, error=contact_form.message('invalid_number')))

        minimum = tag.get_option('min', 'num', single=True)
        if minimum:
            schema.add_rule(create_rule(
                'minnumber',
                field=tag.name,
                threshold=minimum,
                error=contact_form.message('number_too_small'),
            ))

        maximum = tag.get_option('max', 'num', single=True)
        if maximum:
            schema.add_rule(create_rule(
                'maxnumber',
                field=tag.name,
                threshold=maximum,
                error=contact_form.message('number_too_large'),
            ))


def contribute_date_rules(schema: Schema, contact_form: 'ContactForm'):
    for tag in contact_form.scan_form_tags(basetype='date'):
        add_required_rule(schema, tag, contact_form)
        schema.add_rule(create_rule('date', field=tag.name, error=contact_form.message('invalid_date')))

        minimum = tag.get_date_option('min')
        if minimum is not None:
            schema.add_rule(create_rule(
                'mindate',
                field=tag.name,
                threshold=minimum,
                error=contact_form.message('date_too_early'),
            ))

        maximum = tag.get_date_option('max')
        if maximum is not None:
            schema.add_rule(create_rule(
                'maxdate',
                field=tag.name,
                threshold=maximum,
                error=contact_form.message('date_too_late'),
            ))


def contribute_selectable_rules(schema: Schema, contact_form: 'ContactForm'):
    for tag in contact_form.scan_form_tags(basetype=SELECTABLE_BASETYPES):
        if tag.is_required() or tag.type_ == 'radio':
            schema.add_rule(create_rule('required', field=tag.name, error=contact_form.message('invalid_required')))

        if tag.basetype == 'checkbox' and tag.has_option('exclusive'):
            schema.add_rule(create_rule(
                'maxitems',
                field=tag.name,
                threshold=1,
                error=contact_form.message('invalid_too_long'),
            ))

        if not tag.has_option('free_text'):
            schema.add_rule(create_rule(
                'enum',
                field=tag.name,
                accept=tag.values,
                error=contact_form.message('invalid_option'),
            ))


def contribute_file_rules(schema: Schema, contact_form: 'ContactForm'):
    for tag in contact_form.scan_form_tags(basetype='file'):
        if tag.is_required():
            schema.add_rule(create_rule(
                'requiredfile',
                field=tag.name,
                error=contact_form.message('invalid_required'),
            ))

        schema.add_rule(create_rule(
            'file',
            field=tag.name,
            accept=acceptable_filetypes(tag),
            error=contact_form.message('upload_file_type_invalid'),
        ))
        schema.add_rule(create_rule(
            'maxfilesize',
            field=tag.name,
            threshold=tag.get_limit_option(),
            error=contact_form.message('upload_file_too_large'),
        ))


def register_standard_tag_types(registry: TagTypeRegistry):
    registry.register(['text', 'text*', 'email', 'email*', 'url', 'url*', 'tel', 'tel*'], render_text, ['name-attr'])
    registry.register(['textarea', 'textarea*'], render_textarea, ['name-attr'])
    registry.register(['number', 'number*', 'range', 'range*'], render_number, ['name-attr'])
    registry.register(['date', 'date*'], render_date, ['name-attr'])
    registry.register(['select', 'select*'], render_select, ['name-attr', 'selectable-values'])
    registry.register(
        ['checkbox', 'checkbox*', 'radio'],
        render_checkbox,
        ['name-attr', 'selectable-values', 'multiple-controls-container'],
    )
    registry.register('acceptance', render_acceptance, ['name-attr'])
    registry.register(['file', 'file*'], render_file, ['name-attr', 'file-uploading'])
    registry.register('hidden', render_hidden, ['name-attr', 'display-hidden'])
    registry.register('submit', render_submit)
    registry.register('response', render_response, ['display-block'])
    registry.register('reflection', render_reflection, ['name-attr', 'display-block', 'not-for-mail'])

    registry.add_schema_contributor(contribute_text_rules)
    registry.add_schema_contributor(contribute_textarea_rules)
    registry.add_schema_contributor(contribute_number_rules)
    registry.add_schema_contributor(contribute_date_rules)
    registry.add_schema_contributor(contribute_selectable_rules)
    registry.add_schema_contributor(contribute_file_rules)
